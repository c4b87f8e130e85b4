"""
Unit Tests for path flattening and field classification
"""

import copy
import unittest

from ecslog.classifier import FieldClassifier, is_empty
from ecslog.flattener import (
    flatten, get_path, is_free, iter_leaves, merge_leaves, merge_values, set_path, unset_path,
)
from ecslog.schema import SchemaIndex
from schema_fixture import SCHEMA


class TestFlatten(unittest.TestCase):

    def testNestedMapping(self):
        data = {'http': {'request': {'method': 'GET', 'body': {'content': 'x'}}}, 'a': 1}

        self.assertEqual(flatten(data), {
            'http.request.method': 'GET',
            'http.request.body.content': 'x',
            'a': 1,
        })

    def testFalsyLeavesKept(self):
        data = {'a': {'zero': 0, 'false': False, 'none': None, 'empty': ''}}

        self.assertEqual(flatten(data), {
            'a.zero': 0,
            'a.false': False,
            'a.none': None,
            'a.empty': '',
        })

    def testEmptyMappingsDropped(self):
        self.assertEqual(flatten({'a': {}, 'b': {'c': {}}, 'd': []}), {'d': []})

    def testSequencesAreLeaves(self):
        self.assertEqual(flatten({'tags': [{'a': 1}]}), {'tags': [{'a': 1}]})

    def testFlatMappingUnchanged(self):
        flat = {'a': 1, 'b.c': 'x'}
        self.assertEqual(flatten(flat), flat)

    def test_input_not_mutated(self):
        data = {'a': {'b': 1}}
        flatten(data)
        self.assertEqual(data, {'a': {'b': 1}})


class TestPathHelpers(unittest.TestCase):

    def testGetPath(self):
        data = {'a': {'b': {'c': 1}}}

        self.assertEqual(get_path(data, 'a.b.c'), 1)
        self.assertIsNone(get_path(data, 'a.x'))
        self.assertEqual(get_path(data, 'a.b.c.d', 'missing'), 'missing')

    def testSetPathCreatesParents(self):
        data = {}
        set_path(data, 'a.b.c', 1)
        set_path(data, 'a.b.d', 2)

        self.assertEqual(data, {'a': {'b': {'c': 1, 'd': 2}}})

    def testUnsetPathPrunesEmptyParents(self):
        data = {'a': {'b': {'c': 1}}, 'x': 1}

        self.assertTrue(unset_path(data, 'a.b.c'))
        self.assertEqual(data, {'x': 1})

    def testUnsetPathKeepsSiblings(self):
        data = {'a': {'b': 1, 'c': 2}}

        self.assertTrue(unset_path(data, 'a.b'))
        self.assertEqual(data, {'a': {'c': 2}})

    def testUnsetMissingPath(self):
        data = {'a': {'b': 1}}

        self.assertFalse(unset_path(data, 'a.x'))
        self.assertFalse(unset_path(data, 'a.b.c'))
        self.assertEqual(data, {'a': {'b': 1}})

    def testUnsetPathByKeyTuple(self):
        data = {'request': {'body.content': 'x', 'method': 'GET'}}

        self.assertTrue(unset_path(data, ('request', 'body.content')))
        self.assertEqual(data, {'request': {'method': 'GET'}})

    def testIterLeavesKeepsDottedKeys(self):
        leaves = list(iter_leaves({'request': {'body.content': 'x', 'method': 'GET'}}))

        self.assertEqual(leaves, [
            (('request', 'body.content'), 'x'),
            (('request', 'method'), 'GET'),
        ])

    def testIsFree(self):
        data = {'log': {'level': 'INFO', 'file': {'path': '/a'}}, 'message': 'hi'}

        self.assertTrue(is_free(data, 'log.origin'))
        self.assertTrue(is_free(data, 'http.request'))
        self.assertFalse(is_free(data, 'log.level'))
        self.assertFalse(is_free(data, 'log.file'))
        self.assertFalse(is_free(data, 'message.text'))

    def testMergeLeavesReturnsRejected(self):
        target = {'log': {'level': 'INFO'}}
        rejected = merge_leaves(target, {'log': {'level': 'DEBUG', 'x': 1}})

        self.assertEqual(target, {'log': {'level': 'INFO', 'x': 1}})
        self.assertEqual(rejected, {'log': {'level': 'DEBUG'}})

    def testMergeValues(self):
        self.assertEqual(merge_values({'a': 1}, {'b': 2}), {'a': 1, 'b': 2})
        self.assertEqual(merge_values({'a': 1}, {'a': 2}), {'a': [1, 2]})
        self.assertEqual(merge_values({'a': 1}, 'z'), [{'a': 1}, 'z'])


class TestFieldClassifier(unittest.TestCase):

    def setUp(self):
        self.classifier = FieldClassifier(SchemaIndex.from_schema(SCHEMA))

    def testStructuredMatch(self):
        result = self.classifier.classify('http', {'request': {'method': 'GET'}})

        self.assertEqual(result.structured, {'request': {'method': 'GET'}})
        self.assertEqual(result.remaining, {})
        self.assertTrue(result.hasStructured)
        self.assertFalse(result.hasRemaining)

    def testUnmatchedSiblingStaysInPlace(self):
        result = self.classifier.classify('http', {'request': {'method': 'GET', 'unknown_field': 'x'}})

        self.assertEqual(result.structured, {'request': {'method': 'GET'}})
        self.assertEqual(result.remaining, {'request': {'unknown_field': 'x'}})

    def testFlattenedLeavesAreText(self):
        result = self.classifier.classify('http', {
            'response': {'status_code': 200},
            'request': {'body': {'content': False}},
        })

        self.assertEqual(result.structured, {
            'response': {'status_code': '200'},
            'request': {'body': {'content': 'false'}},
        })

    def testZeroIsStillMatched(self):
        result = self.classifier.classify('http', {'response': {'status_code': 0}})

        self.assertEqual(result.structured, {'response': {'status_code': '0'}})
        self.assertFalse(result.hasRemaining)

    def testDottedKeyMovedToCanonicalPath(self):
        result = self.classifier.classify('http', {'request': {'body.content': 'x'}})

        self.assertEqual(result.structured, {'request': {'body': {'content': 'x'}}})
        self.assertEqual(result.remaining, {})

    def testDottedAndNestedKeyForSameField(self):
        result = self.classifier.classify('http', {'request': {'body.content': 'a', 'body': {'content': 'b'}}})

        self.assertEqual(result.structured, {'request': {'body': {'content': 'a'}}})
        self.assertEqual(result.remaining, {'request': {'body': {'content': 'b'}}})

    def testNoneLeafStaysNone(self):
        result = self.classifier.classify('http', {'request': {'method': None}})

        self.assertEqual(result.structured, {'request': {'method': None}})
        self.assertFalse(result.hasRemaining)

    def testDirectKeyCopiedVerbatim(self):
        result = self.classifier.classify('error', {'code': 42, 'extra_info': 'x'})

        self.assertEqual(result.structured, {'code': 42})
        self.assertEqual(result.remaining, {'extra_info': 'x'})

    def testDirectKeyWithNestedValue(self):
        result = self.classifier.classify('http', {'version': {'major': 1}})

        self.assertEqual(result.structured, {'version': {'major': 1}})
        self.assertFalse(result.hasRemaining)

    def testUnknownNamespaceUntouched(self):
        subtree = {'a': 1}
        result = self.classifier.classify('custom_ns', subtree)

        self.assertEqual(result.structured, {})
        self.assertEqual(result.remaining, {'a': 1})

    def testNonMappingSubtreeFallsThrough(self):
        result = self.classifier.classify('http', 'GET')

        self.assertEqual(result.structured, {})
        self.assertEqual(result.remaining, 'GET')
        self.assertTrue(result.hasRemaining)

    def testInputNotMutated(self):
        subtree = {'request': {'method': 'GET', 'other': 1}, 'version': '1.1'}
        original = copy.deepcopy(subtree)

        self.classifier.classify('http', subtree)

        self.assertEqual(subtree, original)

    def test_no_leaf_in_both_outputs(self):
        subtree = {
            'request': {'method': 'POST', 'body': {'content': 'x', 'bytes': 1}, 'id': 'r1'},
            'response': {'status_code': 500, 'mime': 'text/html'},
            'version': '2',
            'other': True,
        }
        result = self.classifier.classify('http', subtree)

        structured = set(flatten(result.structured))
        remaining = set(flatten(result.remaining))
        self.assertEqual(structured & remaining, set())
        self.assertEqual(structured | remaining, set(flatten(subtree)))

    def test_is_empty(self):
        self.assertTrue(is_empty(None))
        self.assertTrue(is_empty({}))
        self.assertTrue(is_empty([]))
        self.assertFalse(is_empty(False))
        self.assertFalse(is_empty(0))
        self.assertFalse(is_empty(''))


if __name__ == '__main__':
    unittest.main()
