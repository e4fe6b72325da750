import pytest

from copyrec.layout.builder import LayoutBuilder, RecordLayout


def build_base_layout() -> RecordLayout:
    return (
        LayoutBuilder()
        .declare(1, "BASE")
        .declare(5, "FIELD_A", "X(11)")
        .declare(5, "FIELD_B")
        .declare(10, "FIELD_B1", "9(4)")
        .declare(10, "FIELD_B2", "X(2)")
        .declare(5, "FIELD_C", occurs=3)
        .declare(10, "FIELD_C1", "9(4)")
        .declare(10, "FIELD_C2", "X(2)")
        .declare(5, "FIELD_D", "X(10)", occurs=2)
        .declare(5, "FIELD_E", occurs=2)
        .declare(10, "FIELD_E1", occurs=2)
        .declare(15, "FIELD_E11", "X(1)")
        .finish()
    )


@pytest.fixture
def base_layout() -> RecordLayout:
    return build_base_layout()
