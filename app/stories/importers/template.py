import csv
import io

from app.stories.models import MAX_QUESTIONS

TEMPLATE_HEADERS = [
    "idea_title",
    "idea_description",
    *[f"question_{n}" for n in range(1, MAX_QUESTIONS + 1)],
    "coverage_start_date",
    "coverage_end_date",
    "tags",
    "interviewees",
]

REQUIRED_HEADERS = ["idea_title"]

SAMPLE_ROWS = [
    [
        "Local Environmental Impact",
        "Investigating pollution effects on local wildlife",
        "What pollution sources affect our area?",
        "How has wildlife been impacted?",
        "What cleanup efforts are underway?",
        "How can residents help?",
        "What policies need changing?",
        "What is the long-term outlook?",
        "2024-01-15",
        "2024-03-15",
        "environment,pollution,wildlife",
        "Environmental Scientist,Local Mayor",
    ],
    [
        "School Lunch Program Innovation",
        "How schools are improving nutrition and sustainability",
        "What changes were made to the program?",
        "How do students respond to new options?",
        "What are the nutritional benefits?",
        "How is food sourcing different?",
        "What challenges were faced?",
        "What are the cost implications?",
        "2024-02-01",
        "2024-04-01",
        "education,nutrition,sustainability",
        'School Nutritionist,Principal,"Rivera, Ana"',
    ],
]


def render_template() -> str:
    """Sample import file with the canonical header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(TEMPLATE_HEADERS)
    writer.writerows(SAMPLE_ROWS)
    return buffer.getvalue()
