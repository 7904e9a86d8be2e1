import unittest

from moho.objects import *
from moho.views import class_view, field_view, type_view, value_view


class TestTypes(unittest.TestCase):
    def test_keywords(self):
        self.assertIs(type_from_name('double'), FLOAT)
        self.assertIs(type_from_name('long'), INTEGER)
        self.assertIs(type_from_name('string'), STRING)
        self.assertEqual(type_from_name('AActor'), ClassType('AActor'))

    def test_is_primitive(self):
        for typ in (VOID, CHAR, BOOL, FLOAT, STRING, INTEGER):
            self.assertTrue(typ.is_primitive())
            self.assertFalse(typ.is_composite())

        self.assertFalse(ClassType('Actor').is_primitive())
        self.assertFalse(PointerType(INTEGER).is_primitive())

    def test_inner(self):
        self.assertEqual(PointerType(ClassType('Actor'), 2).inner(), ClassType('Actor'))
        self.assertEqual(ArrayType(MatrixType(FLOAT)).inner(), MatrixType(FLOAT))
        self.assertEqual(ReferenceType(BOOL).inner(), BOOL)

        with self.assertRaises(TypeError):
            INTEGER.inner()

        with self.assertRaises(TypeError):
            ClassType('Actor').inner()

    def test_innermost(self):
        typ = ArrayType(MatrixType(PointerType(ClassType('Actor'))))
        self.assertEqual(typ.innermost(), ClassType('Actor'))
        self.assertIs(INTEGER.innermost(), INTEGER)

    def test_pointer_depth(self):
        with self.assertRaises(ValueError):
            PointerType(INTEGER, 3)

    def test_kind_and_spelling(self):
        typ = ArrayType(MatrixType(PointerType(INTEGER, 2)))

        self.assertEqual(str(typ), 'Matrix<int**>[]')
        self.assertEqual(typ.kind, 'array')
        self.assertEqual(typ.inner().kind, 'matrix')
        self.assertEqual(ReferenceType(FLOAT).kind, 'ref')
        self.assertEqual(ClassType('A').kind, 'class')
        self.assertEqual(INTEGER.kind, 'integer')
        self.assertTrue(typ.is_array())
        self.assertTrue(PointerType(INTEGER).is_pointer())
        self.assertTrue(ReferenceType(FLOAT).is_reference())
        self.assertTrue(MatrixType(FLOAT).is_matrix())
        self.assertTrue(ClassType('A').is_class())


class TestValues(unittest.TestCase):
    def test_default(self):
        self.assertTrue(DEFAULT.is_default())
        self.assertFalse(NULLPTR.is_default())
        self.assertTrue(NULLPTR.is_nullptr())

    def test_kinds_are_distinct(self):
        self.assertNotEqual(Value.integer(1), Value.boolean(True))
        self.assertNotEqual(Value.integer(1), Value.float(1.0))
        self.assertNotEqual(Value.integer(65), Value.char(65))

    def test_char_range(self):
        self.assertEqual(Value.char(255).data, 255)

        with self.assertRaises(ValueError):
            Value.char(256)

        with self.assertRaises(ValueError):
            Value.char(-1)

    def test_str(self):
        self.assertEqual(str(NULLPTR), 'nullptr')
        self.assertEqual(str(Value.boolean(True)), 'true')
        self.assertEqual(str(Value.char(65)), "'65'")
        self.assertEqual(str(Value.string('hi')), '"hi"')
        self.assertEqual(str(Value.integer(-3)), '-3')
        self.assertEqual(str(Value.float(2.5)), '2.5')
        self.assertEqual(float(str(Value.float(1 / 3))), 1 / 3)

    def test_property_str(self):
        self.assertEqual(str(Property('Count', Value.integer(5))), 'Count=5')
        self.assertEqual(str(Property('Reflected', meta=True)), 'meta Reflected')
        self.assertTrue(Property('Reflected').is_flag())


class TestTranslationUnit(unittest.TestCase):
    def test_sequence(self):
        unit = TranslationUnit((Class('A'), Class('B', ('A',))))

        self.assertEqual(len(unit), 2)
        self.assertEqual([dclass.name for dclass in unit], ['A', 'B'])
        self.assertEqual(unit[1].primary_base, 'A')
        self.assertEqual(unit.find('B'), unit[1])
        self.assertEqual(str(unit[1]), 'class B : A')


class TestViews(unittest.TestCase):
    def test_field_view_default_value(self):
        view = field_view(Field('health', INTEGER))

        self.assertEqual(view['value']['kind'], 'default')
        self.assertFalse(view['has_value'])
        self.assertEqual(view['type']['kind'], 'integer')

        with self.assertRaises(TypeError):
            view['name'] = 'other'

    def test_type_view(self):
        view = type_view(PointerType(ClassType('Actor'), 2))

        self.assertEqual(view['kind'], 'pointer')
        self.assertEqual(view['depth'], 2)
        self.assertEqual(view['text'], 'Actor**')
        self.assertEqual(view['inner']['name'], 'Actor')

    def test_value_view(self):
        self.assertEqual(value_view(Value.float(3.5))['text'], '3.5')

    def test_class_view(self):
        dclass = Class('APickup', ('AActor',), Block((Property('Group'),), (
            Field('Count', INTEGER, Value.integer(3)),
            Method('Collect', 'void', (Argument('Collector', 'APawn*'),)),
        )), (Property('Blueprintable'),))

        view = class_view(dclass)

        self.assertEqual(view['primary_base'], 'AActor')
        self.assertEqual(view['properties'][0]['name'], 'Blueprintable')
        self.assertEqual(view['fields'][0]['properties'][0]['name'], 'Group')
        self.assertEqual(view['fields'][0]['value']['data'], 3)
        self.assertEqual(view['methods'][0]['arguments'][0]['type'], 'APawn*')


if __name__ == '__main__':
    unittest.main()
