from tests import unittest


class TypeChecksEnabledTest(unittest.TestCase):
    type_checks = True

    def setUp(self) -> None:
        super().setUp()
        self.module = self.load(unittest.build_example_registry())

    def test_validators(self) -> None:
        m = self.module
        self.assertTrue(m.is_PAIR({'a': 1, 'b': 2}))
        self.assertTrue(m.is_PAIR({'a': 1, 'b': 2, 'extra': 'ignored'}))
        self.assertFalse(m.is_PAIR({'a': 1}))
        self.assertFalse(m.is_PAIR({'a': 256, 'b': 2}))
        self.assertFalse(m.is_PAIR({'a': True, 'b': 2}))
        self.assertFalse(m.is_PAIR([1, 2]))
        self.assertTrue(m.is_POINT([1, -1]))
        self.assertFalse(m.is_POINT([1]))
        self.assertFalse(m.is_POINT([1, 2, 3]))
        self.assertTrue(m.is_MARKER({}))
        self.assertFalse(m.is_MARKER(None))
        self.assertTrue(m.is_CHOICE({'tag': 'A'}))
        self.assertTrue(m.is_CHOICE({'tag': 'B', 'value': [1]}))
        self.assertFalse(m.is_CHOICE({'tag': 'B'}))
        self.assertFalse(m.is_CHOICE({'tag': 'C'}))
        self.assertFalse(m.is_CHOICE('A'))
        self.assertTrue(m.is_SHAPE({'tag': 'Labeled', 'value': {'label': '', 'tags': [], 'color': None}}))
        self.assertFalse(m.is_SHAPE({'tag': 'Labeled', 'value': {'label': '', 'tags': [1], 'color': None}}))
        self.assertFalse(m.is_SHAPE({'tag': 'Line', 'value': [[0, 0]]}))

    def test_shape_mismatch(self) -> None:
        m = self.module
        for value in ({'a': 1}, {'a': 256, 'b': 1}, {'a': True, 'b': 1}, {'a': '1', 'b': 1}, None):
            with self.assertRaises(m.ShapeMismatch):
                m.serialize('Pair', value)
        with self.assertRaises(m.ShapeMismatch):
            m.serialize('Choice', {'tag': 'Z'})
        with self.assertRaises(m.ShapeMismatch):
            m.serialize('Document', {'name': b'not a str', 'payload': b'', 'pairs': [], 'shape': None, 'marker': {}})

    def test_shape_mismatch_is_serialization_error(self) -> None:
        with self.assertRaises(self.module.SerializationError):
            self.module.serialize('Point', [1])


class TypeChecksDisabledTest(unittest.TestCase):
    type_checks = False

    def setUp(self) -> None:
        super().setUp()
        self.module = self.load(unittest.build_example_registry())

    def test_no_validators(self) -> None:
        self.assertFalse(hasattr(self.module, 'is_PAIR'))
        self.assertFalse(hasattr(self.module, 'TYPE_CHECKS'))
        source = self.generate(unittest.build_example_registry())
        self.assertNotIn('def is_', source.split('def serialize_PAIR')[1])

    def test_same_wire_format(self) -> None:
        checked = self.load(unittest.build_example_registry(), type_checks=True)
        value = {'a': 5, 'b': 300}
        self.assertEqual(self.module.serialize('Pair', value), checked.serialize('Pair', value))

    def test_missing_field_still_fails(self) -> None:
        with self.assertRaises(self.module.ShapeMismatch):
            self.module.serialize('Pair', {'a': 1})
        with self.assertRaises(self.module.ShapeMismatch):
            self.module.serialize('Point', [1])
        with self.assertRaises(self.module.ShapeMismatch):
            self.module.serialize('Pair', {'a': 'x', 'b': 1})

    def test_unknown_variant_still_fails(self) -> None:
        with self.assertRaises(self.module.ShapeMismatch):
            self.module.serialize('Choice', {'tag': 'Z'})

    def test_out_of_range_number_overflows(self) -> None:
        with self.assertRaises(self.module.NumericOverflow):
            self.module.serialize('Pair', {'a': 256, 'b': 1})
