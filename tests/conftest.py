import pytest
import sys
from pathlib import Path
from PIL import Image, ImageDraw

# Add src to sys.path so we can import docfill
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())


class FakeMeasurer:
    """
    Deterministic measurer: heights by element text, counting calls.

    Elements with a fixed_height report it unchanged.
    """

    def __init__(self, heights=None, default=10.0):
        self.heights = dict(heights or {})
        self.default = default
        self.calls = []

    def measure(self, element, style, available_width):
        self.calls.append(element.text)
        if element.fixed_height is not None:
            return element.fixed_height
        return self.heights.get(element.text, self.default)


# Common test fixtures
@pytest.fixture
def fake_measurer():
    """Factory for FakeMeasurer instances."""
    def _create(heights=None, default=10.0):
        return FakeMeasurer(heights, default)
    return _create


@pytest.fixture
def signature_image():
    """A 300x100 white image with a scribble."""
    img = Image.new("RGB", (300, 100), color="white")
    draw = ImageDraw.Draw(img)
    draw.line([(10, 80), (80, 20), (150, 70), (290, 30)], fill="black", width=4)
    return img


@pytest.fixture
def lease_text():
    """Small lease template exercising every field kind."""
    return (
        "RESIDENTIAL LEASE AGREEMENT\n"
        "\n"
        "This lease is made between the landlord and the tenant named below.\n"
        "\n"
        "Tenant Name: ____________\n"
        "Middle Name (optional): ____________\n"
        "Monthly Rent: $________\n"
        "Start Date: __/__/____\n"
        "\n"
        "[ ] Pets allowed [ ] Smoking allowed\n"
        "\n"
        "Tenant Signature: ______________\n"
        "Date: __________\n"
    )
