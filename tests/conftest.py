import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from weatherpanel.config import DEFAULT_CONFIG
from weatherpanel.model import Row


def cell(value="", **extra):
    out = {"type": "value", "value": value, "width": 50, "color": "blue"}
    out.update(extra)
    return out


def data_row(*values, **extra):
    row = {"groups": [{"width": 100, "cells": [cell(v) for v in values] or [cell()]}]}
    row.update(extra)
    return row


def title_row(text="Section", **extra):
    row = {"type": "title", "groups": [{"width": 100, "cells": [cell(text, type="text", width=100)]}]}
    row.update(extra)
    return row


def payload(*rows, **extra):
    out = {"weatherData": {"rows": list(rows)}}
    out.update(extra)
    return out


def parse(*rows):
    return [Row.from_dict(r) for r in rows]


@pytest.fixture
def config():
    return DEFAULT_CONFIG
