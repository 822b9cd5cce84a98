"""Shared fixtures for the truss engine test suite."""

import pytest

from truss_engine import PIN, ROLLER_Y, Connection, Joint, Truss


def build_triangle(load=(0.0, -1000.0)):
    """A=(0,0) pinned, B=(4,0) on a y-roller, C=(2,3) loaded; members AC, BC, AB."""
    truss = Truss()
    a = truss.add_joint(Joint((0.0, 0.0), fixtures=PIN, id="A"))
    b = truss.add_joint(Joint((4.0, 0.0), fixtures=ROLLER_Y, id="B"))
    c = truss.add_joint(Joint((2.0, 3.0), force=load, id="C"))
    truss.add_connection(a.id, c.id, Connection(id="AC"))
    truss.add_connection(b.id, c.id, Connection(id="BC"))
    truss.add_connection(a.id, b.id, Connection(id="AB"))
    return truss


@pytest.fixture
def triangle():
    return build_triangle()


@pytest.fixture
def solved_triangle():
    truss = build_triangle()
    assert truss.compute()
    return truss


@pytest.fixture
def cantilever_bar():
    """Single member, A fully fixed, B free and loaded transverse to the member."""
    truss = Truss()
    a = truss.add_joint(Joint((0.0, 0.0), fixtures=PIN, id="A"))
    b = truss.add_joint(Joint((2.0, 0.0), force=(0.0, -500.0), id="B"))
    truss.add_connection(a.id, b.id, Connection(id="AB"))
    return truss


@pytest.fixture
def make_triangle():
    return build_triangle
