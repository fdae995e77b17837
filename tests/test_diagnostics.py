"""Tests for diagnostics module."""

from tfconfig.diagnostics import DiagSeverity, Diagnostic, Diagnostics, DiagnosticsError
from tfconfig.module import SourcePos


class TestDiagnostics:
    """Tests for Diagnostics collection."""

    def test_empty_has_no_errors(self):
        """Test an empty collection reports no errors."""
        assert not Diagnostics().has_errors()

    def test_order_preserved_without_dedup(self):
        """Test records keep append order and duplicates are kept."""
        diags = Diagnostics()
        diags.warning("first")
        diags.error("second")
        diags.warning("first")
        assert [d.summary for d in diags] == ["first", "second", "first"]

    def test_has_errors(self):
        """Test has_errors only reacts to error records."""
        diags = Diagnostics()
        diags.warning("just a warning")
        assert not diags.has_errors()
        diags.error("broken")
        assert diags.has_errors()

    def test_filters(self):
        """Test errors() and warnings() split by kind."""
        diags = Diagnostics()
        diags.error("e1")
        diags.warning("w1")
        diags.error("e2")
        assert [d.summary for d in diags.errors()] == ["e1", "e2"]
        assert [d.summary for d in diags.warnings()] == ["w1"]

    def test_append_diagnostic(self):
        """Test plain list append works with Diagnostic records."""
        diags = Diagnostics()
        diags.append(Diagnostic(DiagSeverity.ERROR, "summary", "detail"))
        assert diags[0].severity == DiagSeverity.ERROR
        assert diags[0].detail == "detail"


class TestDiagnostic:
    """Tests for Diagnostic formatting."""

    def test_str_with_pos_and_detail(self):
        """Test string form includes kind, position and detail."""
        diag = Diagnostic(
            DiagSeverity.WARNING, "Odd thing", "More info", SourcePos(filename="main.tf", line=3)
        )
        assert str(diag) == "Warning: Odd thing (main.tf:3)\n  More info"

    def test_str_summary_only(self):
        """Test string form without optional parts."""
        assert str(Diagnostic(DiagSeverity.ERROR, "Broken")) == "Error: Broken"


class TestDiagnosticsError:
    """Tests for DiagnosticsError."""

    def test_message_lists_errors(self):
        """Test message is built from error records only."""
        diags = Diagnostics()
        diags.warning("ignored")
        diags.error("Bad block")
        err = DiagnosticsError(diags)
        assert str(err) == "Error: Bad block"
        assert len(err.diagnostics) == 2
