import pathlib
import tempfile
import unittest
from unittest import mock
from urllib.parse import parse_qs

import httpx
import requests

from term_catalog.cache import cache_path, load_cache, save_cache
from term_catalog.errors import FetchError, NotFoundError
from term_catalog.models import SubjectInfo, SubjectRecord, TermInfo, TermRecord
from term_catalog.pipeline import CACHE_NAMESPACE, build_term_catalog, cli
from term_catalog.test.test_forms import TERMS_PAGE, TERMS_URL

POST_URL = "https://wl11gp.neu.edu/udcprod8/bwckgens.p_proc_term_date"


def page_session(body: str = TERMS_PAGE) -> mock.Mock:
    session = mock.Mock(spec=requests.Session)
    session.get.return_value = mock.Mock(text=body, raise_for_status=mock.Mock())
    return session


def subjects_handler(request: httpx.Request) -> httpx.Response:
    term_id = parse_qs(request.content.decode())["p_term"][0]
    body = f'<select name="sel_subj"><option value="CS{term_id}">Computer Science</option></select>'
    return httpx.Response(200, text=body)


def subjects_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(subjects_handler))


class TestBuildTermCatalog(unittest.TestCase):
    def test_catalog(self):
        session = page_session()
        terms = build_term_catalog(TERMS_URL, session=session, client=subjects_client(), reference_year=2024)

        session.get.assert_called_once()
        self.assertEqual(session.get.call_args.args[0], TERMS_URL)
        self.assertEqual([(t.value.term_id, t.value.text, t.value.host) for t in terms], [("202510", "Fall 2024", "neu.edu"), ("202530", "Spring 2025", "neu.edu")])
        for term in terms:
            self.assertEqual([s.value.subject for s in term.deps], [f"CS{term.value.term_id}"])
            self.assertEqual(term.deps[0].value.term_id, term.value.term_id)

    def test_page_fetch_error(self):
        session = mock.Mock(spec=requests.Session)
        session.get.side_effect = requests.ConnectionError("connection refused")

        with self.assertRaises(FetchError) as cm:
            build_term_catalog(TERMS_URL, session=session, client=subjects_client(), reference_year=2024)
        self.assertEqual(cm.exception.url, TERMS_URL)
        self.assertIsNone(cm.exception.term_id)

    def test_no_terms_skips_subjects(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no subject fetch expected")

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        with self.assertLogs("term_catalog.terms", level="ERROR"):
            terms = build_term_catalog(TERMS_URL, session=page_session(), client=client, reference_year=2030)

        self.assertEqual(terms, [])

    def test_dev_cache(self):
        with tempfile.TemporaryDirectory() as tmp:
            data_dir = pathlib.Path(tmp)
            first = build_term_catalog(TERMS_URL, session=page_session(), client=subjects_client(), dev=True, data_dir=data_dir, reference_year=2024)
            self.assertTrue(cache_path(data_dir, CACHE_NAMESPACE, TERMS_URL).exists())

            offline = mock.Mock(spec=requests.Session)
            offline.get.side_effect = requests.ConnectionError("offline")
            second = build_term_catalog(TERMS_URL, session=offline, dev=True, data_dir=data_dir, reference_year=2024)

            self.assertEqual(second, first)
            offline.get.assert_not_called()

    def test_production_ignores_cache(self):
        with tempfile.TemporaryDirectory() as tmp:
            data_dir = pathlib.Path(tmp)
            save_cache(data_dir, CACHE_NAMESPACE, TERMS_URL, [])
            session = page_session()
            terms = build_term_catalog(TERMS_URL, session=session, client=subjects_client(), data_dir=data_dir, reference_year=2024)

            session.get.assert_called_once()
            self.assertEqual(len(terms), 2)


class TestCli(unittest.TestCase):
    def test_error_exits_with_message(self):
        argv = ["term-catalog", TERMS_URL]
        error = NotFoundError(TERMS_URL, "p_term")
        with mock.patch("sys.argv", argv), mock.patch("term_catalog.pipeline.build_term_catalog", side_effect=error):
            with self.assertRaises(SystemExit) as cm:
                cli()

        self.assertEqual(cm.exception.code, str(error))
        self.assertIn("p_term", cm.exception.code)


class TestCache(unittest.TestCase):
    def test_round_trip(self):
        terms = [
            TermRecord(
                value=TermInfo(term_id="202535", text="Spring 2025", host="neu.edu", sub_college_name="LAW"),
                deps=[SubjectRecord(value=SubjectInfo(subject="LAW", text="Law", term_id="202535", host="neu.edu"))],
            ),
            TermRecord(value=TermInfo(term_id="202510", text="Fall 2024", host="neu.edu"), deps=[], error="timed out"),
        ]
        with tempfile.TemporaryDirectory() as tmp:
            self.assertIsNone(load_cache(pathlib.Path(tmp), CACHE_NAMESPACE, TERMS_URL))
            save_cache(pathlib.Path(tmp), CACHE_NAMESPACE, TERMS_URL, terms)
            self.assertEqual(load_cache(pathlib.Path(tmp), CACHE_NAMESPACE, TERMS_URL), terms)


if __name__ == "__main__":
    unittest.main()
