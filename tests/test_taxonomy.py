"""
Tests for the category taxonomy
"""

import pytest

from linkshelf.taxonomy import DEFAULT_CATEGORIES, DEFAULT_TAXONOMY, CategoryTaxonomy


class TestCategoryTaxonomy:
    """Test the default vocabulary and overrides"""

    def test_default_vocabulary(self):
        assert DEFAULT_TAXONOMY.categories == DEFAULT_CATEGORIES
        assert len(DEFAULT_TAXONOMY.categories) == 11
        assert DEFAULT_TAXONOMY.default_category == "기타"
        assert "프론트엔드 개발" in DEFAULT_TAXONOMY.categories

    def test_pseudo_categories_are_valid_but_not_vocabulary(self):
        """Test pipeline-status labels are accepted in queries but never produced by the classifier"""
        assert DEFAULT_TAXONOMY.pseudo_categories == ("콘텐츠 부족", "분석 실패")
        for label in DEFAULT_TAXONOMY.pseudo_categories:
            assert DEFAULT_TAXONOMY.is_valid(label)
            assert label not in DEFAULT_TAXONOMY.categories

    def test_is_valid(self):
        assert DEFAULT_TAXONOMY.is_valid("보안")
        assert not DEFAULT_TAXONOMY.is_valid("Security")
        assert not DEFAULT_TAXONOMY.is_valid("")

    def test_describe(self):
        assert "React" in DEFAULT_TAXONOMY.describe("프론트엔드 개발")
        assert DEFAULT_TAXONOMY.describe("unknown") == ""

    def test_every_category_has_tables(self):
        """Test each vocabulary label except the catch-all has fallback tables"""
        pattern_categories = {category for category, _ in DEFAULT_TAXONOMY.keyword_patterns}
        domain_categories = {category for category, _ in DEFAULT_TAXONOMY.domain_keywords}

        assert pattern_categories == set(DEFAULT_CATEGORIES) - {"기타"}
        assert domain_categories == set(DEFAULT_CATEGORIES) - {"기타"}

    def test_patterns_ignore_case(self):
        patterns = dict(DEFAULT_TAXONOMY.keyword_patterns)

        assert patterns["클라우드 & DevOps"].search("KUBERNETES")

    def test_default_must_be_in_vocabulary(self):
        with pytest.raises(ValueError):
            CategoryTaxonomy(categories=("A", "B"), default_category="C")

    def test_from_dict_empty(self):
        assert CategoryTaxonomy.from_dict(None) == CategoryTaxonomy.from_dict({})

    def test_from_dict_overrides(self):
        taxonomy = CategoryTaxonomy.from_dict({
            "categories": ["Web", "Misc"],
            "default_category": "Misc",
            "analysis_failed": "failed",
            "descriptions": {"Web": "websites"},
            "keyword_patterns": {"Web": r"html|css"},
            "domain_keywords": {"Web": ["W3Schools"]},
            "path_keywords": {"Web": ["frontend"]},
        })

        assert taxonomy.categories == ("Web", "Misc")
        assert taxonomy.analysis_failed == "failed"
        assert taxonomy.insufficient_content == "콘텐츠 부족"
        assert taxonomy.describe("Web") == "websites"
        assert taxonomy.keyword_patterns[0][1].search("CSS grid")
        assert taxonomy.domain_keywords == (("Web", ("w3schools",)),)
        assert taxonomy.path_keywords == (("Web", ("frontend",)),)
