import json
import logging

from config.logging import REDACTED, JsonFormatter, RedactingFilter, SamplingFilter


def _record(msg="order_placed", level=logging.INFO, **extra):
    record = logging.LogRecord("foodhub.orders", level, __file__, 1, msg, None, None)
    record.__dict__.update(extra)
    return record


def test_json_formatter_merges_extras():
    payload = json.loads(JsonFormatter().format(_record(event="order_placed", user_id=3, total=object())))
    assert payload["message"] == "order_placed"
    assert payload["event"] == "order_placed"
    assert payload["user_id"] == 3
    assert payload["level"] == "INFO"
    assert isinstance(payload["total"], str)


def test_redacting_filter_masks_payment_fields():
    record = _record(msg={"card_number": "4111111111111111", "method": "card"}, cvv="123")
    assert RedactingFilter(["card_number", "cvv"]).filter(record)
    assert record.cvv == REDACTED
    assert record.msg == {"card_number": REDACTED, "method": "card"}


def test_sampling_keeps_allowed_events_and_other_levels():
    sampler = SamplingFilter(rate=0.0, levels=["INFO"], allow_events=["order_placed"])
    assert sampler.filter(_record(event="order_placed"))
    assert not sampler.filter(_record(msg="cart.updated", event="cart.updated"))
    assert sampler.filter(_record(msg="cart.updated", level=logging.WARNING))
