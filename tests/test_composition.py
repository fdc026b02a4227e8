from typetutor.services.composition import CompositionGate


def test_plain_changes_pass_through():
    gate = CompositionGate()
    assert gate.on_raw_change("a") == "a"
    assert not gate.composing


def test_interim_values_are_held_back():
    gate = CompositionGate()
    gate.on_composition_start()
    assert gate.on_raw_change("ㄱ") is None
    assert gate.on_raw_change("가") is None
    assert gate.buffer == "가"
    assert gate.on_composition_end("가") == "가"
    assert not gate.composing
    assert gate.buffer is None


def test_reset_drops_pending_composition():
    gate = CompositionGate()
    gate.on_composition_start()
    gate.on_raw_change("ㄴ")
    gate.reset()
    assert not gate.composing
    assert gate.on_raw_change("n") == "n"


def test_end_without_start_is_a_commit():
    assert CompositionGate().on_composition_end("x") == "x"
