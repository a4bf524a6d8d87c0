import logging

from json_schema_to_model.pipeline import Diagnostic, DiagnosticKind, Diagnostics


def test_add_logs_and_collects(caplog):
    diagnostics = Diagnostics()
    with caplog.at_level(logging.WARNING):
        diagnostic = diagnostics.add(DiagnosticKind.LOAD, "Could not load missing.json", "file:///s/missing.json")
    assert diagnostic == Diagnostic(DiagnosticKind.LOAD, "Could not load missing.json", "file:///s/missing.json")
    assert str(diagnostic) == "[load] Could not load missing.json (file:///s/missing.json)"
    assert "[load] Could not load missing.json" in caplog.text
    assert list(diagnostics) == [diagnostic]


def test_of_kind_and_clear():
    diagnostics = Diagnostics()
    diagnostics.add(DiagnosticKind.NAMING, "Class name Thing is already used, using Thing2")
    diagnostics.add(DiagnosticKind.COMPOSITION, "Cannot translate the anyOf of Holder")
    assert len(diagnostics) == 2
    assert [str(d) for d in diagnostics.of_kind(DiagnosticKind.NAMING)] == [
        "[naming] Class name Thing is already used, using Thing2"
    ]
    diagnostics.clear()
    assert len(diagnostics) == 0
