import logging

import numpy as np
import pytest

from refsketch.logging_utils import apply_debug_logging, debug_log_call
from refsketch.path import Prop, ReferencePath
from refsketch.snap import SnapPoint, nearest


def test_debug_log_call_traces_entry_exit_and_errors(caplog):
    logger = logging.getLogger("refsketch.tests.trace")

    @debug_log_call(logger)
    def divide(a, b):
        return a / b

    with caplog.at_level(logging.DEBUG, logger=logger.name):
        assert divide(6, 3) == 2
        with pytest.raises(ZeroDivisionError):
            divide(1, 0)

    messages = [record.getMessage() for record in caplog.records]
    assert any(message.startswith("Entering") and "args=[6, 3]" in message for message in messages)
    assert any(message.endswith("-> 2.0") for message in messages)
    assert any(message.startswith("Exception in") for message in messages)


def test_arguments_use_describe_and_array_summaries(caplog):
    logger = logging.getLogger("refsketch.tests.describe")

    @debug_log_call(logger)
    def consume(path, array):
        return None

    with caplog.at_level(logging.DEBUG, logger=logger.name):
        consume(ReferencePath.step(2, Prop.MID), np.zeros((3, 2)))

    entering = caplog.records[0].getMessage()
    assert "<ReferencePath step[2].mid>" in entering
    assert "ndarray(shape=(3, 2), dtype=float64)" in entering


def test_wrapping_is_idempotent():
    logger = logging.getLogger("refsketch.tests.idempotent")

    def identity(value):
        return value

    once = debug_log_call(logger)(identity)
    assert debug_log_call(logger)(once) is once


def test_apply_debug_logging_respects_skip():
    def kept():
        return 1

    def skipped():
        return 2

    kept.__module__ = skipped.__module__ = "fake_module"
    namespace = {"__name__": "fake_module", "kept": kept, "skipped": skipped}

    apply_debug_logging(namespace, skip={"skipped"})

    assert getattr(namespace["kept"], "_debug_logging_wrapped", False)
    assert namespace["skipped"] is skipped


def test_snap_lookup_is_traced(caplog):
    points = [SnapPoint(ReferencePath.step(0, Prop.SELF), (1.0, 1.0))]

    with caplog.at_level(logging.DEBUG, logger="refsketch.snap"):
        hit = nearest((1.5, 1.0), points, 5.0)

    assert hit is not None
    assert any(record.getMessage().startswith("Entering nearest") for record in caplog.records)
