import unittest

from dipgraph.persistence.unit import UnitType
from tests.utils import OrderSetBuilder

# These tests are based off https://webdiplomacy.net/doc/DATC_v3_0.html


# 6.G. TEST CASES, CONVOYING TO ADJACENT PLACES
class TestDATC_G(unittest.TestCase):
    def test_6_g_1(self):
        """ 6.G.1. TEST CASE, TWO UNITS CAN SWAP PLACES BY CONVOY
            The only way to swap two units, is by convoy.
            England: A Norway - Sweden
            England: F Skagerrak Convoys A Norway - Sweden
            Russia: A Sweden - Norway
            In most interpretations of the rules, the units in Norway and Sweden will be swapped.
        """
        b = OrderSetBuilder()
        a_norway = b.move(b.england, UnitType.ARMY, "Nwy", "Swe")
        f_skagerrak = b.convoy(b.england, "Ska", a_norway, "Swe")
        a_sweden = b.move(b.russia, UnitType.ARMY, "Swe", "Nwy")

        b.assertSuccess(a_norway, f_skagerrak, a_sweden)
        b.assertNotDislodge(a_norway, a_sweden)
        b.moves_adjudicate(self)
