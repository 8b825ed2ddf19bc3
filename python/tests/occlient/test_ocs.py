import json
import unittest as test
from pathlib import Path

from occlient import ocs
from occlient.exceptions import OCSError, UnexpectedOwnCloudResponse

datadir = Path(__file__).parents[0] / "data"
capsfile = datadir / "ocs-capabilities.xml"
failfile = datadir / "ocs-failure.xml"
userfile = datadir / "ocs-user.json"

def envelope(code, message):
    return {"ocs": {"meta": {"statuscode": code, "message": message}, "data": {}}}

class TestCheckStatus(test.TestCase):

    def test_ok(self):
        self.assertIsNone(ocs.check_ocs_status(envelope(100, '')))
        self.assertIsNone(ocs.check_ocs_status(envelope("100", 'OK')))
        self.assertIsNone(ocs.check_ocs_status(envelope(" 100 ", 'OK')))

    def test_error_message(self):
        self.assertEqual(ocs.check_ocs_status(envelope(404, 'Wrong path')), 'Wrong path')
        self.assertEqual(ocs.check_ocs_status(envelope("997", 'Unauthorised')), 'Unauthorised')

    def test_empty_message(self):
        env = envelope(404, '')
        self.assertIs(ocs.check_ocs_status(env), env)

        env = envelope(404, {})
        self.assertIs(ocs.check_ocs_status(env), env)

        env = {"ocs": {"meta": {"statuscode": 404}}}
        self.assertIs(ocs.check_ocs_status(env), env)

    def test_accepted_codes(self):
        self.assertIsNone(ocs.check_ocs_status(envelope(200, 'OK'), [100, 200]))
        self.assertEqual(ocs.check_ocs_status(envelope(200, 'OK')), 'OK')
        self.assertEqual(ocs.check_ocs_status(envelope(100, 'OK'), [200]), 'OK')

    def test_non_numeric_code(self):
        self.assertEqual(ocs.check_ocs_status(envelope("ok", 'bad')), 'bad')

    def test_no_meta(self):
        self.assertIsNone(ocs.check_ocs_status({}))
        self.assertIsNone(ocs.check_ocs_status({"ocs": {"data": []}}))
        self.assertIsNone(ocs.check_ocs_status({"message": "hello"}))

    def test_status_code(self):
        self.assertEqual(ocs.ocs_status_code(envelope("100", '')), 100)
        self.assertEqual(ocs.ocs_status_code(envelope(999, '')), 999)
        self.assertIsNone(ocs.ocs_status_code({}))
        self.assertIsNone(ocs.ocs_status_code({"ocs": {}}))

class TestParseBody(test.TestCase):

    def test_xml(self):
        with open(capsfile, 'rb') as fd:
            env = ocs.parse_ocs_body(fd.read())

        meta = env['ocs']['meta']
        self.assertEqual(meta['statuscode'], '100')
        self.assertEqual(meta['message'], 'OK')
        self.assertEqual(meta['totalitems'], '')
        self.assertIsNone(ocs.check_ocs_status(env))

        data = env['ocs']['data']
        self.assertEqual(data['version']['major'], '10')
        self.assertEqual(data['version']['string'], '10.8.0')
        self.assertEqual(data['capabilities']['core']['webdav-root'], 'remote.php/webdav')
        self.assertEqual(data['capabilities']['files']['blacklisted_files'],
                         ['.htaccess', '.DS_Store'])

    def test_xml_failure(self):
        with open(failfile) as fd:
            env = ocs.parse_ocs_body(fd.read())
        self.assertEqual(ocs.ocs_status_code(env), 404)
        self.assertEqual(ocs.check_ocs_status(env), "Wrong path, file/folder doesn't exist")
        self.assertEqual(env['ocs']['data'], '')

    def test_xml_empty_message(self):
        body = "<ocs><meta><statuscode>400</statuscode><message/></meta><data/></ocs>"
        env = ocs.parse_ocs_body(body)
        self.assertIs(ocs.check_ocs_status(env), env)

    def test_repeated_elements(self):
        body = "<ocs><meta><statuscode>100</statuscode></meta><data>" \
               "<share><id>1</id></share><share><id>2</id></share></data></ocs>"
        env = ocs.parse_ocs_body(body)
        self.assertEqual(env['ocs']['data']['share'], [{'id': '1'}, {'id': '2'}])

    def test_json(self):
        with open(userfile) as fd:
            body = fd.read()
        env = ocs.parse_ocs_body(body)
        self.assertEqual(env, json.loads(body))
        self.assertEqual(ocs.ocs_status_code(env), 100)

    def test_json_message(self):
        with self.assertRaises(OCSError) as cm:
            ocs.parse_ocs_body('{"message": "Login required"}')
        self.assertEqual(cm.exception.payload, "Login required")
        self.assertEqual(str(cm.exception), "Login required")

    def test_invalid(self):
        with self.assertRaises(UnexpectedOwnCloudResponse) as cm:
            ocs.parse_ocs_body("Internal Server Error")
        self.assertEqual(str(cm.exception), "Invalid response body: Internal Server Error")
        self.assertEqual(cm.exception.response, "Internal Server Error")

        with self.assertRaises(UnexpectedOwnCloudResponse):
            ocs.parse_ocs_body(b"")
        with self.assertRaises(UnexpectedOwnCloudResponse):
            ocs.parse_ocs_body("[1, 2]")

        with self.assertRaises(UnexpectedOwnCloudResponse) as cm:
            ocs.parse_ocs_body(b"[1, 2]")
        self.assertEqual(str(cm.exception), "Invalid response body: [1, 2]")
        self.assertEqual(cm.exception.response, "[1, 2]")

class TestCheckResponse(test.TestCase):

    def test_ok(self):
        env = envelope(100, 'OK')
        self.assertIs(ocs.check_ocs_response(env), env)

    def test_error(self):
        with self.assertRaises(OCSError) as cm:
            ocs.check_ocs_response(envelope(404, 'Wrong path'), ep="http://x/ocs")
        self.assertEqual(cm.exception.payload, 'Wrong path')
        self.assertEqual(cm.exception.statuscode, 404)
        self.assertEqual(cm.exception.ep, "http://x/ocs")

        env = envelope(403, '')
        with self.assertRaises(OCSError) as cm:
            ocs.check_ocs_response(env)
        self.assertIs(cm.exception.payload, env)
        self.assertIn("403", str(cm.exception))

    def test_user_response(self):
        self.assertTrue(ocs.check_user_response(envelope(100, 'OK')))
        self.assertTrue(ocs.check_user_response(envelope(102, 'failure')))
        with self.assertRaises(OCSError) as cm:
            ocs.check_user_response(envelope("999", ''))
        self.assertEqual(str(cm.exception), "Provisioning API has been disabled at your instance")
        self.assertEqual(cm.exception.statuscode, 999)


if __name__ == '__main__':
    test.main()
