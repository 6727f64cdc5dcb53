# ===============================================
# tests/test_decoder.py
# -----------------------------------------------
# Incremental extraction of text deltas from a
# fragmented streamGenerateContent body.
# ===============================================

import json

from aiterm.generate.decoder import StreamDecoder, decode_stream, gemini_text


def obj(text, **extra):
    body = {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}
    body.update(extra)
    return json.dumps(body, ensure_ascii=False)


def decode(fragments):
    return list(decode_stream(fragments))


def test_single_object_single_fragment():
    assert decode([obj("Hello").encode()]) == ["Hello"]


def test_byte_by_byte_matches_single_fragment():
    raw = obj("Hello, wörld ☃").encode("utf-8")
    one = decode([raw])
    drip = decode([raw[i:i + 1] for i in range(len(raw))])
    assert one == drip == ["Hello, wörld ☃"]


def test_two_objects_in_one_fragment_keep_order():
    raw = (obj("first") + obj("second")).encode()
    assert decode([raw]) == ["first", "second"]


def test_gemini_array_framing():
    # the real endpoint wraps objects in a JSON array with commas and CRLFs
    raw = ("[" + obj("a") + ",\r\n" + obj("b") + "]").encode()
    fragments = [raw[:10], raw[10:57], raw[57:]]
    assert decode(fragments) == ["a", "b"]


def test_truncated_object_then_close_yields_nothing():
    raw = obj("never finished").encode()[:-3]
    assert decode([raw]) == []


def test_truncated_tail_after_valid_object():
    raw = (obj("kept") + obj("lost")[:20]).encode()
    assert decode([raw]) == ["kept"]


def test_malformed_object_between_valid_ones_is_skipped():
    raw = (obj("one") + '{"candidates": [oops]}' + obj("two")).encode()
    assert decode([raw]) == ["one", "two"]


def test_wrong_envelope_is_skipped():
    raw = ('{"usageMetadata": {"promptTokenCount": 3}}' + obj("ok")).encode()
    assert decode([raw]) == ["ok"]


def test_empty_text_and_missing_candidates_emit_nothing():
    raw = (obj("") + '{"candidates": []}' + obj("x")).encode()
    assert decode([raw]) == ["x"]


def test_extra_keys_are_ignored():
    raw = obj("hi", usageMetadata={"totalTokenCount": 9}, modelVersion="gemini-1.5-flash").encode()
    assert decode([raw]) == ["hi"]


def test_noise_without_braces_is_discarded():
    d = StreamDecoder()
    assert d.feed(b"\r\n,,  ]") == []
    assert d.pending == ""


def test_partial_object_waits_for_more_input():
    raw = obj("later").encode()
    d = StreamDecoder()
    assert d.feed(raw[:15]) == []
    assert d.pending.startswith("{")
    assert d.feed(raw[15:]) == ["later"]
    assert d.pending == ""


def test_bytes_before_first_brace_are_dropped():
    d = StreamDecoder()
    assert d.feed(b"garbage " + obj("x").encode() + b" trailing") == ["x"]
    assert d.pending == ""


def test_multibyte_char_split_across_fragments():
    raw = obj("日本").encode("utf-8")
    cut = raw.index("本".encode("utf-8")) + 1  # inside the 3-byte sequence
    assert decode([raw[:cut], raw[cut:]]) == ["日本"]


def test_invalid_bytes_are_replaced_not_fatal():
    raw = b'{"candidates": [{"content": {"parts": [{"text": "a\xffb"}]}}]}'
    assert decode([raw]) == ["a\ufffdb"]


def test_close_drops_unbalanced_tail_without_error():
    d = StreamDecoder()
    d.feed(b'{"candidates": [')
    assert d.close() == []
    assert d.pending == ""


def test_custom_extractor():
    raw = b'{"response": "one"}{"response": "two"}'
    out = list(decode_stream([raw], extract=lambda s: json.loads(s)["response"]))
    assert out == ["one", "two"]


def test_decode_is_lazy():
    seen = []

    def fragments():
        for text in ("a", "b"):
            seen.append(text)
            yield obj(text).encode()

    gen = decode_stream(fragments())
    assert next(gen) == "a"
    assert seen == ["a"]


def test_gemini_text_helper():
    assert gemini_text(obj("z")) == "z"
    assert gemini_text("{not json}") is None


def test_quoted_braces_break_depth_counting():
    # Known limitation: a '}' inside a string value is counted as structure,
    # so the object is cut short and dropped instead of decoded.
    raw = obj("a}b").encode()
    assert decode([raw]) == []

    # the objects after it are still decoded
    assert decode([raw + obj("after").encode()]) == ["after"]
