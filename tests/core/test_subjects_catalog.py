"""Subject Catalog — lookups, flat options, search and the prompt catalog."""

from tutor_network.core.subjects_catalog import (
    SUBJECTS,
    all_subtopics_flat,
    build_catalog_prompt,
    filter_subtopics_by_search,
    get_subject_by_slug,
    get_subtopic,
    is_valid_subtopic,
)


def test_core_subjects_present():
    assert list(SUBJECTS) == [
        "math", "science", "english", "history", "foreign-languages", "arts",
    ]


def test_lookup_by_slug():
    assert get_subject_by_slug("math").title == "Math"
    assert get_subject_by_slug("cooking") is None


def test_subtopic_lookup_is_scoped_to_subject():
    assert get_subtopic("math", "algebra").title == "Algebra"
    assert get_subtopic("science", "algebra") is None
    assert get_subtopic("nope", "algebra") is None
    assert is_valid_subtopic("history", "us-history")
    assert not is_valid_subtopic("history", "spanish")


def test_flat_options_keep_catalog_order_and_are_cached():
    options = all_subtopics_flat()
    assert len(options) == 15
    assert (options[0].subject_slug, options[0].subtopic_id) == ("math", "algebra")
    assert options[-1].subtopic_id == "music"
    assert all_subtopics_flat() is options


def test_search_is_case_insensitive_over_subject_and_subtopic():
    options = all_subtopics_flat()
    assert [o.subtopic_id for o in filter_subtopics_by_search(options, "ALG")] == ["algebra"]
    assert len(filter_subtopics_by_search(options, "math")) == 4
    assert {o.subtopic_id for o in filter_subtopics_by_search(options, "history")} == {
        "us-history", "world-history",
    }


def test_blank_search_returns_everything():
    options = all_subtopics_flat()
    assert filter_subtopics_by_search(options, "   ") == list(options)
    assert filter_subtopics_by_search(options, None) == list(options)


def test_catalog_prompt_lists_every_subtopic():
    prompt = build_catalog_prompt()
    lines = prompt.splitlines()
    assert len(lines) == 15
    assert lines[0].startswith('- subject_slug: "math", subtopic_id: "algebra"')
    assert 'title: "Science > Physics"' in prompt
