import logging
import unittest as test
from unittest.mock import Mock
from urllib.parse import unquote

from occlient import helpers

class TestHelpers(test.TestCase):

    def test_normalize_path(self):
        self.assertEqual(helpers.normalize_path(""), "/")
        self.assertEqual(helpers.normalize_path(None), "/")
        self.assertEqual(helpers.normalize_path("/"), "/")
        self.assertEqual(helpers.normalize_path("a/b"), "/a/b")
        self.assertEqual(helpers.normalize_path("/a/b/"), "/a/b/")

        for p in ["", "/", "x", "/x/y", "x/y/", "中文"]:
            once = helpers.normalize_path(p)
            self.assertEqual(helpers.normalize_path(once), once)

    def test_encode_uri_path(self):
        self.assertEqual(helpers.encode_uri_path(""), "/")
        self.assertEqual(helpers.encode_uri_path("foo/bar"), "/foo/bar")
        self.assertEqual(helpers.encode_uri_path("/new folder/a b.txt"), "/new%20folder/a%20b.txt")
        self.assertEqual(helpers.encode_uri_path("/中文.txt"), "/%E4%B8%AD%E6%96%87.txt")
        self.assertEqual(helpers.encode_uri_path("/a&b?c#d"), "/a%26b%3Fc%23d")
        self.assertEqual(helpers.encode_uri_path("/it's (1)!*~"), "/it's%20(1)!*~")

    def test_encode_uri_path_round_trip(self):
        for p in ["/docs/sub-dir/file_1.txt", "a/b/c", "/x.y~z/", "/"]:
            enc = helpers.encode_uri_path(p)
            self.assertEqual('/'.join(unquote(s) for s in enc.split('/')), helpers.normalize_path(p))

    def test_escape_xml(self):
        self.assertEqual(helpers.escape_xml("""<a href="x">'b' & c</a>"""),
                         "&lt;a href=&quot;x&quot;&gt;&apos;b&apos; &amp; c&lt;/a&gt;")
        self.assertEqual(helpers.escape_xml("plain"), "plain")
        self.assertEqual(helpers.escape_xml(5), 5)
        self.assertIsNone(helpers.escape_xml(None))

    def test_coerce_booleans(self):
        props = {"a": "true", "b": "false", "c": "True", "d": 1, "e": "yes", "f": {"g": "true"}}
        out = helpers.coerce_booleans(props)
        self.assertIs(out, props)
        self.assertIs(out["a"], True)
        self.assertIs(out["b"], False)
        self.assertEqual(out["c"], "True")
        self.assertEqual(out["d"], 1)
        self.assertEqual(out["e"], "yes")
        self.assertEqual(out["f"], {"g": "true"})

        self.assertEqual(helpers.coerce_booleans("true"), "true")
        self.assertEqual(helpers.coerce_booleans(["true"]), ["true"])

    def test_encode_string(self):
        self.assertEqual(helpers.encode_string("中"), b'\xe4\xb8\xad')
        self.assertEqual(helpers.encode_string("abc"), b'abc')

    def test_blab(self):
        log = Mock()
        helpers.blab(log, "dropped %d", 3)
        log.log.assert_called_once_with(helpers.BLAB, "dropped %d", 3)
        self.assertLess(helpers.BLAB, logging.DEBUG)


if __name__ == '__main__':
    test.main()
