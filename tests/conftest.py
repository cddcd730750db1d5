import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import paper_composer
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from paper_composer.core.models import (  # noqa: E402
    ExamDocument,
    HeaderTemplate,
    Language,
    Question,
    Section,
)


# Common test fixtures
@pytest.fixture
def scenario_document() -> ExamDocument:
    """One section, one question with math markup and marks left in the body."""
    return ExamDocument(
        title="Central Board",
        subject="Mathematics",
        total_marks="10",
        time_allowed="1 hour",
        sections=(
            Section(
                title="Section A",
                questions=(
                    Question(id="q1", number="Q.1", text="(1) Define x^2 + y^2 = r^2. (10)", marks=""),
                ),
            ),
        ),
    )


@pytest.fixture
def sample_payload() -> dict:
    """Transcription result in the external camelCase shape."""
    return {
        "title": "Board of Secondary Education",
        "subject": "Physics",
        "totalMarks": 50,
        "timeAllowed": "2 hours",
        "sections": [
            {
                "title": "Section A",
                "instructions": "Attempt all questions.",
                "questions": [
                    {"number": "Q.1", "text": "State Newton's second law.", "marks": "(5)"},
                    {
                        "number": "Question 2:",
                        "text": "Choose the unit of force.",
                        "marks": 2,
                        "subQuestions": ["(a) Newton", "(b) Joule", "(c) Watt"],
                    },
                ],
            },
            {
                "title": "Section B",
                "questions": [
                    {"number": "3", "text": "1) Derive E = mc^2. (8)"},
                ],
            },
        ],
    }


@pytest.fixture
def sample_document(sample_payload) -> ExamDocument:
    return ExamDocument.from_dict(sample_payload)


@pytest.fixture
def document_factory():
    """Factory for documents with n plain questions in one section."""
    def _create(
        n_questions: int = 3,
        language: Language = Language.EN,
        template: HeaderTemplate = HeaderTemplate.CLASSIC,
        text: str = "Explain the water cycle.",
    ) -> ExamDocument:
        questions = tuple(
            Question(id=f"q{i + 1}", number=str(i + 1), text=text, marks="4")
            for i in range(n_questions)
        )
        return ExamDocument(
            title="Model Paper",
            subject="Geography",
            total_marks=str(4 * n_questions),
            time_allowed="45 minutes",
            language=language,
            header_template=template,
            sections=(Section(title="Section A", questions=questions),),
        )
    return _create
