#!/usr/bin/env python3
"""
Complete Workflow Demo: Author → Preview → Export → Share → Fill

Shows the full workflow:
1. Start an authoring session on the default survey
2. Add a table question and preview a response
3. Export collected responses as CSV
4. Build a shareable link
5. Open the link as a respondent (submission is not sent)
"""

from surveylink.endpoint_store import MemoryEndpointStore
from surveylink.model import QuestionType
from surveylink.session import start_session


def main():
    base_url = "https://forms.example.org/survey"
    endpoint = "https://script.google.com/macros/s/EXAMPLE/exec"

    print("=" * 80)
    print("COMPLETE WORKFLOW DEMO: Author → Preview → Export → Share → Fill")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Author
    # =========================================================================
    print("\n1. AUTHORING...")
    author = start_session(base_url, endpoint_store=MemoryEndpointStore(endpoint))
    print(f"   ✓ Mode: {author.mode.value}")
    print(f"   ✓ Survey: {author.survey.title}")
    print(f"   ✓ Questions: {len(author.survey.questions)}")

    staff = author.add_question()
    author.update_question(
        staff.id,
        title="Environmental staff",
        question_type=QuestionType.DYNAMIC_TABLE,
        columns=["Name", "Role"],
    )
    print(f"   ✓ Added table question {staff.id}")

    # =========================================================================
    # STEP 2: Preview
    # =========================================================================
    print("\n2. PREVIEWING...")
    capture = author.preview()
    for question in capture.survey.questions:
        if question.question_type is QuestionType.SHORT_ANSWER:
            capture.set_value(question.id, "Sample")
        elif question.question_type is QuestionType.MULTIPLE_CHOICE:
            capture.set_value(question.id, question.options[0])
    capture.set_cell(staff.id, 0, "Name", "Nguyễn Văn A")
    capture.set_cell(staff.id, 0, "Role", "Officer")
    failing = author.submit_preview(capture)
    print(f"   ✓ Failing questions: {sorted(failing) or 'none'}")
    print(f"   ✓ View: {author.view.value}, responses: {len(author.responses)}")

    # =========================================================================
    # STEP 3: Export
    # =========================================================================
    print("\n3. EXPORTING...")
    print(f"   ✓ File name: {author.export_filename()}")
    for line in author.export_csv().splitlines():
        print(f"   {line}")

    # =========================================================================
    # STEP 4: Share
    # =========================================================================
    print("\n4. SHARING...")
    link = author.share_link()
    print(f"   ✓ Link length: {len(link)}")
    print(f"   {link[:100]}...")

    # =========================================================================
    # STEP 5: Fill
    # =========================================================================
    print("\n5. OPENING LINK...")
    fill = start_session(link)
    print(f"   ✓ Mode: {fill.mode.value}")
    print(f"   ✓ Endpoint: {fill.endpoint_url}")
    print(f"   ✓ Required questions missing: {len(fill.capture.validate_for_submit())}")

    print("\n" + "=" * 80)
    print("WORKFLOW COMPLETE!")
    print("=" * 80)


if __name__ == "__main__":
    main()
