"""
End-to-end tests for the fill controller.
"""

from pathlib import Path
from unittest.mock import patch

import fitz
import pytest

from docfill.builder import FillConfig, FillError, LayoutConfig, fill_document
from docfill.core.errors import InvalidInput


class TestFillDocument:

    def test_renders_filled_pdf(self, tmp_path: Path, lease_text):
        # Arrange
        output = tmp_path / "lease.pdf"
        values = {
            "tenant_name": "Jane Doe",
            "monthly_rent": "1250",
            "start_date": "01/05/2026",
            "tenant_signature": "Jane Doe",
            "date": "01/05/2026",
        }

        # Act
        result = fill_document(lease_text, values, FillConfig(output_path=output))

        # Assert
        assert result.output_path == output
        assert output.exists()
        assert result.digest is not None and len(result.digest) == 64
        assert result.is_complete
        with fitz.open(str(output)) as doc:
            assert doc.page_count == result.page_count
            text = doc[0].get_text()
        assert "Tenant Name: Jane Doe" in text
        assert "Monthly Rent: $1,250.00" in text

    def test_without_output_path_nothing_is_rendered(self, lease_text):
        result = fill_document(lease_text, {})

        assert result.output_path is None
        assert result.digest is None
        assert result.page_count == 1
        assert len(result.fields) == 8

    def test_reports_missing_required_fields(self, lease_text):
        result = fill_document(lease_text, {"tenant_name": "Jane"})

        assert not result.is_complete
        assert "monthly_rent" in result.missing_fields
        assert "middle_name" not in result.missing_fields

    def test_collects_extraction_and_layout_warnings(self):
        config = FillConfig(layout=LayoutConfig.with_content_height(20))
        text = "__________\n\n" + "\n".join(f"Line {i}" for i in range(5))

        result = fill_document(text, {}, config)

        assert any(w.startswith("empty_label") for w in result.warnings)
        assert any("only 20pt available" in w for w in result.warnings)

    def test_same_input_same_digest(self, tmp_path: Path, lease_text):
        first = fill_document(lease_text, {}, FillConfig(output_path=tmp_path / "a.pdf"))
        second = fill_document(lease_text, {}, FillConfig(output_path=tmp_path / "b.pdf"))
        assert first.digest == second.digest

    def test_write_failure_raises_fill_error(self, tmp_path: Path, lease_text):
        config = FillConfig(output_path=tmp_path / "out.pdf")
        with patch(
            "docfill.builder.controller.render_to_pdf",
            side_effect=OSError("disk full"),
        ):
            with pytest.raises(FillError, match="disk full"):
                fill_document(lease_text, {}, config)

    def test_invalid_text_raises(self):
        with pytest.raises(InvalidInput):
            fill_document(None, {})


class TestFillConfig:

    def test_output_path_coerced_to_path(self, tmp_path: Path):
        config = FillConfig(output_path=str(tmp_path / "x.pdf"))
        assert isinstance(config.output_path, Path)

    def test_empty_date_format_raises(self):
        with pytest.raises(InvalidInput):
            FillConfig(date_format="")

    def test_layout_type_checked(self):
        with pytest.raises(InvalidInput):
            FillConfig(layout={"page_width": 612})
