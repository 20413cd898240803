import base64
import copy
import sys
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

# Add src to sys.path so we can import cia_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from cia_toolkit.builder.assembly import build_paper_model
from cia_toolkit.builder.weightage import compute_weightage
from cia_toolkit.core.models import Header


SAMPLE_PAYLOAD = {
    "header": {
        "academicYear": "2025 – 26",
        "ciaType": "2",
        "courseCode": "CCS336",
        "courseTitle": "Cloud Services Management",
        "programme": "B.E. Computer Science and Engineering",
        "semester": "Fourth",
        "date": "2026-02-18",
        "session": "FN",
    },
    "partA": [
        {"qNo": 1, "text": "Define cloud computing.", "co": "CO1", "btl": "L1"},
        {"qNo": 2, "text": "List two service models.", "co": "CO1", "btl": "L2"},
        {"qNo": 3, "text": "What is elasticity?", "co": "CO2", "btl": "L1"},
        {"qNo": 4, "text": "Find x^2 when x = 3.", "co": "CO2", "btl": "L2"},
        {"qNo": 5, "text": "State the role of a hypervisor.", "co": "CO3", "btl": "L1"},
        {"qNo": 6, "text": "Explain alpha testing.", "co": "CO3", "btl": "L2"},
    ],
    "partB": [
        {
            "qNo": 7,
            "a": {"text": "Explain the cloud reference architecture.", "co": "CO1", "btl": "L3"},
            "b": {"text": "Describe the NIST cloud model.", "co": "CO1", "btl": "L3"},
        },
        {
            "qNo": 8,
            "a": {
                "text": "",
                "co": "CO2",
                "btl": "L3",
                "marks": 16,
                "subdivisions": [
                    {"label": "i)", "text": "Explain auto scaling.", "marks": 8},
                    {"label": "ii)", "text": "Compare IaaS and PaaS.", "marks": "8"},
                ],
            },
            "b": {"text": "Analyse a multi-tenant deployment.", "co": "CO2", "btl": "L4"},
        },
        {
            "qNo": 9,
            "a": {"text": "Analyse SLA monitoring.", "co": "CO3", "btl": "L4"},
            "b": {"text": "Analyse cost optimisation.", "co": "CO3", "btl": "L4"},
        },
    ],
}


# Common test fixtures
@pytest.fixture
def payload():
    """A valid payload (fresh deep copy, safe to mutate)."""
    return copy.deepcopy(SAMPLE_PAYLOAD)


def _encode(img: Image.Image, fmt: str) -> str:
    buffer = BytesIO()
    img.save(buffer, format=fmt)
    return base64.b64encode(buffer.getvalue()).decode("ascii")


@pytest.fixture
def png_data_uri():
    """80x40 opaque PNG as a data URI."""
    img = Image.new("RGB", (80, 40), color="red")
    return "data:image/png;base64," + _encode(img, "PNG")


@pytest.fixture
def rgba_data_uri():
    """Transparent 30x30 PNG as a data URI."""
    img = Image.new("RGBA", (30, 30), color=(0, 0, 255, 0))
    return "data:image/png;base64," + _encode(img, "PNG")


@pytest.fixture
def jpeg_base64():
    """Bare base64 JPEG (no data URI prefix)."""
    img = Image.new("RGB", (64, 48), color="green")
    return _encode(img, "JPEG")


@pytest.fixture
def header():
    """Header matching the sample payload."""
    return Header(
        academic_year="2025 – 26",
        assessment_index="2",
        course_code="CCS336",
        course_title="Cloud Services Management",
        programme="B.E. Computer Science and Engineering",
        semester="Fourth",
        date="2026-02-18",
        session="FN",
    )


@pytest.fixture
def paper(payload):
    """Document model built from the sample payload."""
    return build_paper_model(payload)


@pytest.fixture
def weightage(paper):
    """Weightage table for the sample paper."""
    return compute_weightage(paper)
