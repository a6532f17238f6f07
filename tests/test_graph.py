import unittest

from dipgraph.adjudicator.defs import Order, OrderConstructionError, OrderType
from dipgraph.adjudicator.graph import DependencyGraph, create_order_dependency_graph


class TestDependencyGraph(unittest.TestCase):
    def test_duplicate_locations(self):
        with self.assertRaises(OrderConstructionError):
            DependencyGraph([Order.hold("Par"), Order.move("Par", "Bur")])

    def test_supported_attack_on_hold(self):
        par = Order.hold("Par")
        bur = Order.move("Bur", "Par")
        mar = Order.support_move("Mar", "Bur", "Par")
        graph = create_order_dependency_graph([par, bur, mar])

        self.assertEqual(len(graph), 3)
        self.assertTrue(graph.depends_on(par, bur))
        self.assertTrue(graph.depends_on(bur, par))
        self.assertTrue(graph.depends_on(bur, mar))
        self.assertFalse(graph.depends_on(mar, bur))
        self.assertEqual(graph.ready(), [mar])
        self.assertEqual(graph.dependents(mar), [bur])
        self.assertEqual(graph.pending_supports(bur), [mar])

    def test_hold_depends_on_its_support(self):
        par = Order.hold("Par")
        bre = Order.support_hold("Bre", "Par")
        graph = DependencyGraph([par, bre])

        self.assertTrue(graph.depends_on(par, bre))
        self.assertFalse(graph.depends_on(bre, par))

    def test_head_to_head_is_a_two_cycle(self):
        first = Order.move("Par", "Bur")
        second = Order.move("Bur", "Par")
        graph = DependencyGraph([first, second])

        self.assertTrue(graph.depends_on(first, second))
        self.assertTrue(graph.depends_on(second, first))
        self.assertEqual(graph.ready(), [])
        self.assertEqual(graph.sink_components(), [[first, second]])

    def test_contested_destination(self):
        first = Order.move("Par", "Bur")
        second = Order.move("Mun", "Bur")
        graph = DependencyGraph([first, second])

        self.assertTrue(graph.depends_on(first, second))
        self.assertTrue(graph.depends_on(second, first))
        self.assertEqual(graph.moves_into("Bur"), [first, second])

    def test_convoy(self):
        army = Order.move("Lon", "Bre")
        fleet = Order.convoy("Eng", "Lon", "Bre")
        graph = DependencyGraph([army, fleet])

        self.assertTrue(graph.depends_on(army, fleet))
        self.assertFalse(graph.depends_on(fleet, army))
        self.assertTrue(graph.is_convoyed(army))
        self.assertEqual(graph.convoys_for(army), [fleet])

    def test_illegal_orders_only_depend_on_attackers(self):
        illegal = Order.move("Par", "Mos", legal=False)
        illegal.annotate(OrderType.ILLEGAL_ORDER)
        attacker = Order.move("Bur", "Par")
        support = Order.support_hold("Pic", "Par")
        graph = DependencyGraph([illegal, attacker, support])

        self.assertTrue(graph.depends_on(illegal, attacker))
        self.assertFalse(graph.depends_on(illegal, support))
        self.assertEqual(graph.moves_into("Mos"), [])

    def test_removing_orders(self):
        par = Order.hold("Par")
        bur = Order.move("Bur", "Par")
        graph = DependencyGraph([par, bur])

        graph.remove(bur)
        self.assertNotIn(bur, graph)
        self.assertIn(par, graph)
        self.assertEqual(graph.ready(), [par])
        # lookups by province still see every order
        self.assertEqual(graph.occupant("Bur"), bur)

    def test_no_sink_components_without_cycles(self):
        par = Order.hold("Par")
        mar = Order.support_hold("Mar", "Par")
        graph = DependencyGraph([par, mar])
        self.assertEqual(graph.sink_components(), [])
