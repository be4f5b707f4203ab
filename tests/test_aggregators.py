import unittest

from core.errors import DataAccessError, InconsistentSchemaError
from core.ids import IdGenerators
from core.model import Property, Ref, Token, Type
from pipeline.aggregators import node_object_types, relationship_object_types

from fakes import ClosableNames, node_row, rel_row

LABELS = {
    'Person': Token('nl:Person', 'Person'),
    'Actor': Token('nl:Actor', 'Actor'),
    'Movie': Token('nl:Movie', 'Movie'),
}
TYPES = {
    'ACTED_IN': Token('rt:ACTED_IN', 'ACTED_IN'),
    'LIKES': Token('rt:LIKES', 'LIKES'),
}


def rows_of(*rows):
    return lambda: iter(rows)


class NodeObjectTypesTest(unittest.TestCase):
    def test_rows_are_grouped_by_label_combination(self):
        ids = IdGenerators()
        rows = rows_of(
            node_row(['Actor', 'Person'], 'name', ['String'], mandatory=True),
            node_row(['Actor', 'Person'], 'born', ['Long']),
            node_row(['Movie'], 'title', ['String'], mandatory=True),
            node_row(['Person']),
        )
        result = node_object_types(rows, ids.node_object, LABELS)

        self.assertEqual(list(result), ['n:Actor:Person', 'n:Movie', 'n:Person'])
        actor = result['n:Actor:Person']
        self.assertEqual(actor.label_refs, [Ref('nl:Actor'), Ref('nl:Person')])
        self.assertEqual(actor.properties, [
            Property('name', [Type('string')], True),
            Property('born', [Type('integer')], False),
        ])
        self.assertEqual(result['n:Person'].properties, [])

    def test_label_refs_are_sorted(self):
        row = node_row(['Person', 'Actor'], 'name', ['String'])
        row['nodeType'] = ':`Actor`:`Person`'
        result = node_object_types(rows_of(row), IdGenerators().node_object, LABELS)
        self.assertEqual(result['n:Actor:Person'].label_refs, [Ref('nl:Actor'), Ref('nl:Person')])

    def test_no_labels_means_no_query(self):
        def rows():
            raise AssertionError("property table must not be queried")

        self.assertEqual(node_object_types(rows, IdGenerators().node_object, {}), {})

    def test_random_ids_still_deduplicate(self):
        ids = IdGenerators(use_constant_ids=False)
        rows = rows_of(
            node_row(['Person'], 'name', ['String']),
            node_row(['Person'], 'born', ['Long']),
        )
        result = node_object_types(rows, ids.node_object, LABELS)
        self.assertEqual(len(result), 1)
        self.assertEqual(len(next(iter(result.values())).properties), 2)

    def test_unknown_label(self):
        rows = rows_of(node_row(['Ghost'], 'name', ['String']))
        with self.assertRaises(InconsistentSchemaError):
            node_object_types(rows, IdGenerators().node_object, LABELS)

    def test_read_failure_closes_table(self):
        table = ClosableNames([node_row(['Person'])], fail_after=1)
        with self.assertRaises(DataAccessError):
            node_object_types(lambda: table, IdGenerators().node_object, LABELS)
        self.assertTrue(table.closed)

    def test_table_closed_when_row_is_rejected(self):
        table = ClosableNames([node_row(['Ghost'], 'name', ['String'])])
        with self.assertRaises(InconsistentSchemaError):
            node_object_types(lambda: table, IdGenerators().node_object, LABELS)
        self.assertTrue(table.closed)

    def test_query_failure(self):
        def rows():
            raise OSError("connection refused")

        with self.assertRaises(DataAccessError):
            node_object_types(rows, IdGenerators().node_object, LABELS)


class RelationshipObjectTypesTest(unittest.TestCase):
    def nodes(self, ids, *label_sets):
        rows = rows_of(*[node_row(labels) for labels in label_sets])
        return node_object_types(rows, ids.node_object, LABELS)

    def aggregate(self, ids, nodes, *rows, types=TYPES):
        return relationship_object_types(
            rows_of(*rows), ids.node_object, ids.relationship_object, types, LABELS, nodes)

    def test_one_type_with_several_targets(self):
        ids = IdGenerators()
        nodes = self.nodes(ids, ['Actor', 'Person'], ['Movie'], ['Person'])
        result = self.aggregate(
            ids, nodes,
            rel_row('LIKES', ['Person'], ['Movie'], 'stars', ['Long']),
            rel_row('LIKES', ['Person'], ['Person']),
            rel_row('LIKES', ['Actor', 'Person'], ['Movie'], 'stars', ['Long']),
        )

        self.assertEqual(list(result), ['r:LIKES', 'r:LIKES_1'])
        likes_movie = result['r:LIKES']
        self.assertEqual(likes_movie.type_ref, Ref('rt:LIKES'))
        self.assertEqual(likes_movie.from_ref, Ref('n:Person'))
        self.assertEqual(likes_movie.to_ref, Ref('n:Movie'))
        self.assertEqual(len(likes_movie.properties), 2)

        likes_person = result['r:LIKES_1']
        self.assertEqual(likes_person.type_ref, Ref('rt:LIKES'))
        self.assertEqual(likes_person.to_ref, Ref('n:Person'))
        self.assertEqual(likes_person.properties, [])

    def test_endpoints_reuse_node_ids(self):
        ids = IdGenerators(use_constant_ids=False)
        nodes = self.nodes(ids, ['Actor', 'Person'], ['Movie'])
        rels = self.aggregate(ids, nodes, rel_row('ACTED_IN', ['Person', 'Actor'], ['Movie'], 'roles', ['StringArray']))

        acted_in = next(iter(rels.values()))
        self.assertIn(acted_in.from_ref.target_id, nodes)
        self.assertIn(acted_in.to_ref.target_id, nodes)
        self.assertEqual(acted_in.properties, [Property('roles', [Type('array', 'string')], False)])

    def test_random_ids_still_deduplicate(self):
        ids = IdGenerators(use_constant_ids=False)
        nodes = self.nodes(ids, ['Movie'], ['Person'])
        result = self.aggregate(
            ids, nodes,
            rel_row('LIKES', ['Person'], ['Movie'], 'stars', ['Long']),
            rel_row('LIKES', ['Person'], ['Person']),
            rel_row('LIKES', ['Person'], ['Movie'], 'since', ['Date']),
        )
        self.assertEqual(len(result), 2)
        self.assertEqual([len(r.properties) for r in result.values()], [2, 0])

    def test_label_with_back_tick(self):
        labels = {'a`b': Token('nl:a`b', '`a``b`')}
        node_rows = [{'nodeType': ':`a``b`', 'nodeLabels': ['a`b'], 'propertyName': None}]
        for use_constant_ids in (True, False):
            ids = IdGenerators(use_constant_ids)
            nodes = node_object_types(rows_of(*node_rows), ids.node_object, labels)
            rels = relationship_object_types(
                rows_of(rel_row('R', ['a`b'], ['a`b'])), ids.node_object, ids.relationship_object,
                {'R': Token('rt:R', 'R')}, labels, nodes)
            rel = next(iter(rels.values()))
            self.assertIn(rel.from_ref.target_id, nodes)
            self.assertIn(rel.to_ref.target_id, nodes)
        self.assertEqual(list(node_object_types(rows_of(*node_rows), IdGenerators().node_object, labels)), ['n:a`b'])

    def test_unlabeled_endpoint_is_rejected(self):
        for use_constant_ids in (True, False):
            ids = IdGenerators(use_constant_ids)
            nodes = self.nodes(ids, ['Person'])
            with self.assertRaises(InconsistentSchemaError):
                self.aggregate(ids, nodes, rel_row('LIKES', [], ['Person']))

    def test_endpoint_without_node_object_type_is_rejected(self):
        for use_constant_ids in (True, False):
            ids = IdGenerators(use_constant_ids)
            nodes = self.nodes(ids, ['Person'])
            with self.assertRaises(InconsistentSchemaError):
                self.aggregate(ids, nodes, rel_row('LIKES', ['Person'], ['Movie']))

    def test_endpoint_with_unknown_label_is_rejected(self):
        ids = IdGenerators()
        nodes = self.nodes(ids, ['Person'])
        with self.assertRaises(InconsistentSchemaError) as ctx:
            self.aggregate(ids, nodes, rel_row('LIKES', ['Person'], ['Ghost']))
        self.assertIn('Ghost', str(ctx.exception))

    def test_no_types_means_no_query(self):
        def rows():
            raise AssertionError("property table must not be queried")

        ids = IdGenerators()
        self.assertEqual(
            relationship_object_types(rows, ids.node_object, ids.relationship_object, {}, LABELS, {}), {})

    def test_unknown_relationship_type(self):
        ids = IdGenerators()
        nodes = self.nodes(ids, ['Person'])
        with self.assertRaises(InconsistentSchemaError):
            self.aggregate(ids, nodes, rel_row('HATES', ['Person'], ['Person']))


if __name__ == '__main__':
    unittest.main()
