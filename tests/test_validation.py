"""
Blog API — Validation Unit Tests
==================================

What:  Tests for the pure create/update payload checks.

What we test:
    ✅ Fields are checked in order title, author, content
    ✅ Missing, blank or wrongly typed fields are violations
    ✅ Update requires matching path and body ids
    ✅ build_update only keeps updateable fields
"""

import pytest

from blogapi.services.validation import (
    INVALID_FIRST_NAME_ON_CREATE,
    INVALID_FIRST_NAME_ON_UPDATE,
    MISSING_LAST_NAME_ON_CREATE,
    MISSING_LAST_NAME_ON_UPDATE,
    build_new_post,
    build_update,
    find_create_violations,
    find_update_violations,
)


class TestCreateViolations:

    def test_valid_payload_has_no_violations(self, blog_payload):
        assert find_create_violations(blog_payload) == []

    def test_single_name_author_is_valid(self):
        payload = {"title": "T", "author": {"lastName": "Doe"}, "content": "C"}
        assert find_create_violations(payload) == []

    @pytest.mark.parametrize("field", ["title", "content"])
    @pytest.mark.parametrize("value", [None, "", 42])
    def test_missing_or_blank_text_field(self, blog_payload, field, value):
        if value is None:
            del blog_payload[field]
        else:
            blog_payload[field] = value

        assert find_create_violations(blog_payload) == [
            f"The field '{field}' is required and cannot be blank. Please add."
        ]

    @pytest.mark.parametrize("author", [None, "", "Jane Doe"])
    def test_author_must_be_an_object(self, blog_payload, author):
        blog_payload["author"] = author
        assert find_create_violations(blog_payload) == [
            "The field 'author' is required and cannot be blank. Please add."
        ]

    @pytest.mark.parametrize("author", [{}, {"firstName": "Jane"}, {"lastName": ""}])
    def test_author_without_last_name(self, blog_payload, author):
        blog_payload["author"] = author
        assert find_create_violations(blog_payload) == [MISSING_LAST_NAME_ON_CREATE]

    @pytest.mark.parametrize("first_name", [5, {"x": 1}, ["a"], True])
    def test_first_name_must_be_text(self, blog_payload, first_name):
        blog_payload["author"]["firstName"] = first_name
        assert find_create_violations(blog_payload) == [INVALID_FIRST_NAME_ON_CREATE]

    def test_null_first_name_is_allowed(self, blog_payload):
        blog_payload["author"]["firstName"] = None
        assert find_create_violations(blog_payload) == []

    def test_violations_follow_field_order(self):
        violations = find_create_violations({})
        assert [v.split("'")[1] for v in violations] == ["title", "author", "content"]


class TestUpdateViolations:

    def test_matching_ids(self):
        assert find_update_violations("abc", {"id": "abc", "title": "X"}) == []

    @pytest.mark.parametrize("payload", [
        {"id": "456", "title": "X"},
        {"title": "X"},
        {"id": "", "title": "X"},
        {"id": 123, "title": "X"},
    ])
    def test_mismatched_or_missing_ids(self, payload):
        violations = find_update_violations("123", payload)
        assert violations[0].startswith("Error: Request path ID (123) and request body ID (")
        assert violations[0].endswith("must match (and not be missing)")

    def test_mismatch_message_names_both_ids(self):
        violations = find_update_violations("123", {"id": "456"})
        assert violations == [
            "Error: Request path ID (123) and request body ID (456) "
            "must match (and not be missing)"
        ]

    @pytest.mark.parametrize("author", [{}, {"firstName": "Jane"}, "Doe", None])
    def test_author_update_needs_last_name(self, author):
        violations = find_update_violations("1", {"id": "1", "author": author})
        assert violations == [MISSING_LAST_NAME_ON_UPDATE]

    @pytest.mark.parametrize("first_name", [5, {"x": 1}, ["a"]])
    def test_author_update_first_name_must_be_text(self, first_name):
        payload = {"id": "1", "author": {"firstName": first_name, "lastName": "Doe"}}
        assert find_update_violations("1", payload) == [INVALID_FIRST_NAME_ON_UPDATE]

    def test_blank_title_rejected(self):
        violations = find_update_violations("1", {"id": "1", "title": ""})
        assert violations == ["The field 'title' cannot be blank. Record not updated."]

    def test_absent_fields_are_not_checked(self):
        assert find_update_violations("1", {"id": "1"}) == []


class TestBuilders:

    def test_new_post_defaults_first_name(self):
        fields = build_new_post({"title": "T", "author": {"lastName": "Doe"}, "content": "C"})
        assert fields == {
            "title": "T",
            "author": {"firstName": "", "lastName": "Doe"},
            "content": "C",
        }

    def test_new_post_drops_unknown_author_keys(self):
        fields = build_new_post({
            "title": "T",
            "author": {"firstName": "Jane", "lastName": "Doe", "age": 40},
            "content": "C",
        })
        assert fields["author"] == {"firstName": "Jane", "lastName": "Doe"}

    def test_update_keeps_only_updateable_fields(self):
        changes = build_update({"id": "1", "title": "New", "views": 10})
        assert changes == {"title": "New"}

    def test_update_author_keeps_sent_names_only(self):
        changes = build_update({"id": "1", "author": {"lastName": "Smith"}})
        assert changes == {"author": {"lastName": "Smith"}}
