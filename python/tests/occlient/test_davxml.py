import unittest as test
from pathlib import Path

from lxml import etree

from occlient import davxml
from occlient.exceptions import UnexpectedOwnCloudResponse

datadir = Path(__file__).parents[0] / "data"
listfile = datadir / "propfind-list.xml"
errfile = datadir / "dav-error.xml"

class TestParseMultistatus(test.TestCase):

    def setUp(self):
        with open(listfile, 'rb') as fd:
            self.content = fd.read()

    def test_entries(self):
        entries = davxml.parse_multistatus(self.content)
        self.assertEqual([e.href for e in entries],
                         ["/remote.php/webdav/docs/",
                          "/remote.php/webdav/docs/%e4%b8%ad%e6%96%87.txt",
                          "/remote.php/webdav/docs/gone.txt",
                          "/index.php/apps/files/",
                          "/remote.php/webdav/docs/sub%20dir/"])

        first = entries[0]
        self.assertEqual(len(first.propstat), 2)
        self.assertEqual(first.propstat[0].status, davxml.STATUS_OK)
        self.assertEqual(first.propstat[1].status, "HTTP/1.1 404 Not Found")

        props = first.propstat[0].properties
        self.assertEqual(props["{DAV:}quota-used-bytes"], "55")
        self.assertEqual(props["{DAV:}getetag"], '"5f8d0ce8c62b5"')
        self.assertEqual(props["{http://owncloud.org/ns}fileid"], "192")
        restype = props["{DAV:}resourcetype"]
        self.assertEqual(len(restype), 1)
        self.assertEqual(restype[0].tag, "{DAV:}collection")

        self.assertEqual(first.propstat[1].properties["{DAV:}getcontentlength"], "")

        props = entries[1].propstat[0].properties
        self.assertEqual(props["{DAV:}resourcetype"], "")
        self.assertEqual(props["{http://owncloud.org/ns}favorite"], "false")

    def test_str_input(self):
        entries = davxml.parse_multistatus(self.content.decode('utf-8'))
        self.assertEqual(len(entries), 5)

    def test_no_href(self):
        content = """<d:multistatus xmlns:d="DAV:">
  <d:response><d:propstat><d:status>HTTP/1.1 200 OK</d:status></d:propstat></d:response>
  <d:response><d:href>/remote.php/webdav/</d:href></d:response>
</d:multistatus>"""
        entries = davxml.parse_multistatus(content)
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].href, "/remote.php/webdav/")
        self.assertEqual(entries[0].propstat, [])

    def test_bad_xml(self):
        with self.assertRaises(UnexpectedOwnCloudResponse):
            davxml.parse_multistatus("<d:multistatus xmlns:d='DAV:'>")
        with self.assertRaises(UnexpectedOwnCloudResponse):
            davxml.parse_multistatus("")

class TestParseDAVError(test.TestCase):

    def test_message(self):
        with open(errfile, 'rb') as fd:
            body = fd.read()
        self.assertEqual(davxml.parse_dav_error(body), "Parent node does not exist")

    def test_structured_message(self):
        body = '<d:error xmlns:d="DAV:" xmlns:s="http://sabredav.org/ns">' \
               '<s:message><b>oops</b></s:message></d:error>'
        self.assertEqual(davxml.parse_dav_error(body), "")

    def test_unknown(self):
        self.assertEqual(davxml.parse_dav_error("not xml"), "Unknown error")
        self.assertEqual(davxml.parse_dav_error(""), "Unknown error")
        self.assertEqual(davxml.parse_dav_error(None), "Unknown error")
        self.assertEqual(davxml.parse_dav_error('<d:error xmlns:d="DAV:"/>'), "Unknown error")
        self.assertEqual(davxml.parse_dav_error('<d:error xmlns:d="DAV:" xmlns:s="http://sabredav.org/ns">'
                                                '<s:message/></d:error>'), "Unknown error")
        self.assertEqual(davxml.parse_dav_error('<html><s:message xmlns:s="http://sabredav.org/ns">'
                                                'hi</s:message></html>'), "Unknown error")

class TestBuildPropfindBody(test.TestCase):

    def test_all_props(self):
        body = davxml.build_propfind_body()
        root = etree.fromstring(body.encode('utf-8'))
        self.assertEqual(root.tag, "{DAV:}propfind")
        self.assertEqual(len(root), 1)
        self.assertEqual(root[0].tag, "{DAV:}prop")
        self.assertEqual(len(root[0]), 0)

    def test_props(self):
        body = davxml.build_propfind_body(["{DAV:}getetag", "{http://owncloud.org/ns}favorite",
                                           "{http://example.com/ns}color"])
        root = etree.fromstring(body.encode('utf-8'))
        self.assertEqual([c.tag for c in root[0]],
                         ["{DAV:}getetag", "{http://owncloud.org/ns}favorite",
                          "{http://example.com/ns}color"])
        self.assertIn('xmlns:oc="http://owncloud.org/ns"', body)
        self.assertNotIn('xmlns:nc=', body)

    def test_bad_prop_name(self):
        with self.assertRaises(ValueError):
            davxml.build_propfind_body(["getetag"])


if __name__ == '__main__':
    test.main()
