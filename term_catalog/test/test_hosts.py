import unittest

from term_catalog.hosts import get_base_host, supports_page


class TestHosts(unittest.TestCase):
    def test_get_base_host(self):
        test_conditions = [
            {"url": "https://wl11gp.neu.edu/udcprod8/bwckschd.p_disp_dyn_sched", "expected": "neu.edu"},
            {"url": "https://Banner.AUS.edu/axp3b21h/owa", "expected": "aus.edu"},
            {"url": "http://localhost:8080/", "expected": "localhost"},
            {"url": "not a url", "expected": ""},
        ]

        for condition in test_conditions:
            self.assertEqual(get_base_host(condition["url"]), condition["expected"])

    def test_supports_page(self):
        self.assertTrue(supports_page("https://wl11gp.neu.edu/udcprod8/bwckschd.p_disp_dyn_sched"))
        self.assertFalse(supports_page("https://wl11gp.neu.edu/udcprod8/bwckgens.p_proc_term_date"))


if __name__ == "__main__":
    unittest.main()
