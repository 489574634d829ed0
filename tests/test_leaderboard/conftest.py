"""Shared fixtures for leaderboard tests."""

import pytest
from tests.conftest import make_scored

from festival.models import ProgramStatus


@pytest.fixture
def festival_programs():
    """A small festival with one program of every kind.

                              201   202   203   204   205   301
    p1 A zone stage senior    9.5                            6
    p2 B zone off stage jr          8                        7
    p3 General                            10
    p4 A zone group                             20
    p5 A zone (pending)                               10

    Only p1 and p2 count for individual awards: 301 leads with 13.
    """
    return [
        make_scored({201: 9.5, 301: 6}, category="A zone stage senior", program_id="p1"),
        make_scored({202: 8, 301: 7}, category="B zone off stage junior", program_id="p2"),
        make_scored({203: 10}, category="General", program_id="p3"),
        make_scored({204: 20}, category="A zone stage junior", program_id="p4", is_group=True),
        make_scored(
            {205: 10}, category="A zone stage senior", program_id="p5",
            status=ProgramStatus.PENDING,
        ),
    ]
