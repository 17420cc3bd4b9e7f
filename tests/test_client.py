"""Tests for BrevitClient dispatch."""

import asyncio

import pytest

from brevit.client import BrevitClient, clean_text
from brevit.config import BrevitConfig, JsonOptimizationMode
from brevit.emitter import InvalidInputError


def run(coro):
    return asyncio.run(coro)


class TestOptimizeStructured:
    def test_object(self):
        client = BrevitClient()
        data = {"user": {"name": "Javian", "email": "support@javianpicardo.com"}}
        assert run(client.optimize(data)) == (
            "user.name:Javian\nuser.email:support@javianpicardo.com"
        )

    def test_json_string(self):
        client = BrevitClient()
        text = '{"order": {"orderId": "o-456", "status": "SHIPPED"}}'
        assert run(client.optimize(text)) == "order.orderId:o-456\norder.status:SHIPPED"

    def test_uniform_array(self):
        client = BrevitClient()
        data = {"items": [{"sku": "A-88", "name": "Brevit Pro"}, {"sku": "T-22", "name": "Toon Handbook"}]}
        assert run(client.optimize(data)) == (
            "items[2]{sku,name}:\nA-88,Brevit Pro\nT-22,Toon Handbook"
        )

    def test_abbreviation_options_from_config(self):
        data = {"customer": {"name": "Ana", "email": "a@x.com", "phone": "555", "city": "Lima"}}
        on = run(BrevitClient().optimize(data))
        off = run(BrevitClient(BrevitConfig(enable_abbreviations=False)).optimize(data))
        assert on.startswith("@c=customer\n")
        assert off.startswith("customer.name:Ana")

    def test_yaml_mode(self):
        client = BrevitClient(BrevitConfig(json_mode="ToYaml"))
        assert run(client.optimize({"a": 1, "b": [1, 2]})) == "a: 1\nb:\n- 1\n- 2"

    def test_none_mode_is_compact_json(self):
        client = BrevitClient(BrevitConfig(json_mode=JsonOptimizationMode.NONE))
        assert run(client.optimize({"a": 1, "b": "é"})) == '{"a":1,"b":"é"}'

    def test_filter_mode(self):
        config = BrevitConfig(json_mode="Filter", json_paths_to_keep=["user.name"])
        client = BrevitClient(config)
        data = {"user": {"name": "John", "email": "j@x.com"}, "meta": {"v": 1}}
        assert run(client.optimize(data)) == "user.name:John"

    def test_yaml_input_when_enabled(self):
        client = BrevitClient(BrevitConfig(input_formats=["json", "yaml"]))
        assert run(client.optimize("name: alice\nage: 30\n")) == "name:alice\nage:30"

    def test_invalid_tree_raises(self):
        a: dict = {}
        a["a"] = a
        with pytest.raises(InvalidInputError):
            run(BrevitClient().optimize(a))


class TestOptimizeText:
    def test_short_text_returned_as_is(self):
        assert run(BrevitClient().optimize("Hello World")) == "Hello World"

    def test_short_yaml_like_text_stays_text_by_default(self):
        assert run(BrevitClient().optimize("note: hi")) == "note: hi"

    def test_clean_mode(self):
        text = "hello    world\n" * 100
        result = run(BrevitClient().optimize(text))
        assert result == "\n".join(["hello world"] * 100)

    def test_none_mode_keeps_long_text(self):
        text = "x  " * 300
        client = BrevitClient(BrevitConfig(text_mode="None"))
        assert run(client.optimize(text)) == text

    def test_summarize_stub(self):
        client = BrevitClient(BrevitConfig(text_mode="SummarizeFast"))
        result = run(client.optimize("a" * 600))
        assert result.startswith("[SummarizeFast Stub: Summary of text follows...]\n")
        assert ("a" * 150 + "...") in result
        assert result.endswith("[End of summary]")

    def test_custom_text_optimizer(self):
        calls = []

        async def summarize(text, intent):
            calls.append((len(text), intent))
            return "summary"

        client = BrevitClient(text_optimizer=summarize)
        assert run(client.optimize("b" * 501, intent="gist")) == "summary"
        assert calls == [(501, "gist")]

    def test_custom_text_optimizer_not_used_for_short_text(self):
        async def summarize(text, intent):
            raise AssertionError("should not be called")

        client = BrevitClient(text_optimizer=summarize)
        assert run(client.optimize("short")) == "short"

    def test_clean_text(self):
        assert clean_text("  a \t b  \n\n\n\n c ") == "a b\n\nc"


class TestOptimizeImage:
    def test_default_ocr_stub(self):
        result = run(BrevitClient().optimize(b"0123456789"))
        assert result.startswith("[OCR Stub: Extracted text from image (10 bytes)]")

    def test_metadata_mode(self):
        client = BrevitClient(BrevitConfig(image_mode="Metadata"))
        assert run(client.optimize(bytearray(10))) == "[Image: 10 bytes]"

    def test_custom_image_optimizer(self):
        async def ocr(data, intent):
            return f"ocr:{len(data)}"

        client = BrevitClient(image_optimizer=ocr)
        assert run(client.optimize(memoryview(b"abc"))) == "ocr:3"


class TestOptimizePrimitive:
    def test_number(self):
        assert run(BrevitClient().optimize(42)) == "42"

    def test_none_renders_as_null(self):
        assert run(BrevitClient().optimize(None)) == "null"

    def test_bools_render_lowercase(self):
        assert run(BrevitClient().optimize(True)) == "true"
        assert run(BrevitClient().optimize(False)) == "false"

    def test_whole_float(self):
        assert run(BrevitClient().optimize(2.0)) == "2"

    def test_other_objects_use_str(self):
        class Ticket:
            def __str__(self):
                return "ticket#7"

        assert run(BrevitClient().optimize(Ticket())) == "ticket#7"


class TestBrevity:
    def test_uniform_data_is_flattened(self):
        config = BrevitConfig(json_mode=JsonOptimizationMode.NONE)
        client = BrevitClient(config)
        data = {"items": [{"sku": "A-88", "qty": 1}, {"sku": "T-22", "qty": 2}]}
        assert run(client.brevity(data)) == "items[2]{sku,qty}:\nA-88,1\nT-22,2"
        # configured mode is untouched
        assert config.json_mode is JsonOptimizationMode.NONE
        assert run(client.optimize(data)).startswith('{"items":')

    def test_long_text(self):
        async def summarize(text, intent):
            return "short"

        client = BrevitClient(text_optimizer=summarize)
        assert run(client.brevity("z" * 600)) == "short"

    def test_short_text(self):
        assert run(BrevitClient().brevity("Hello")) == "Hello"

    def test_custom_strategy_wins_on_score(self):
        client = BrevitClient()
        client.register_strategy(
            "keys",
            lambda data: {"score": 75, "reason": "key listing"},
            lambda data, intent: ",".join(data),
        )
        assert run(client.brevity({"a": 1, "b": 2})) == "a,b"

    def test_async_custom_strategy(self):
        async def optimizer(data, intent):
            return f"async:{intent}"

        client = BrevitClient()
        client.register_strategy("x", lambda data: {"score": 99}, optimizer)
        assert run(client.brevity({"a": 1}, intent="why")) == "async:why"

    def test_custom_strategy_below_builtin_is_ignored(self):
        client = BrevitClient()
        client.register_strategy(
            "weak",
            lambda data: {"score": 10},
            lambda data, intent: "weak",
        )
        assert run(client.brevity({"a": 1})) == "a:1"
