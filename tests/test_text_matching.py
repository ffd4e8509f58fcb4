import pytest

from resume_ats.helpers.vocabulary import SYNONYM_TABLE
from resume_ats.services.text_matching import build_synonym_table, normalize_text, text_contains


class TestNormalizeText:
    """Test cases for resume text normalization"""

    def test_lowercases_and_strips_punctuation(self):
        assert normalize_text("Node.js / REST-API my_var") == "nodejs / restapi myvar"

    def test_collapses_whitespace(self):
        assert normalize_text("Python\n\n\t  SQL ") == "python sql "

    def test_empty(self):
        assert normalize_text("") == ""

    def test_idempotent(self):
        once = normalize_text("Built a Next.js app -- 30% faster")
        assert normalize_text(once) == once


class TestTextContains:
    """Test cases for direct and synonym term matching"""

    def test_direct_substring_case_insensitive(self):
        resume = normalize_text("Javascript Framework enthusiast")
        assert text_contains(resume, "JavaScript")

    def test_synonym_variant_satisfies_concept(self):
        resume = normalize_text("Skills: JS, HTML")
        assert text_contains(resume, "JavaScript")

    def test_variant_term_names_concept(self):
        # "node" names the nodejs concept, "express" is another variant of it
        resume = normalize_text("REST services in Express")
        assert text_contains(resume, "Node")

    def test_dotted_term_matches_normalized_resume(self):
        resume = normalize_text("Frontend in React and Node.js")
        assert text_contains(resume, "Node.js")

    def test_missing_term(self):
        resume = normalize_text("Python and SQL")
        assert not text_contains(resume, "Java")

    def test_empty_table_disables_synonyms(self):
        resume = normalize_text("Skills: JS")
        assert not text_contains(resume, "JavaScript", synonyms={})


class TestBuildSynonymTable:
    """Test cases for extending the synonym table"""

    def test_adds_new_concept(self):
        table = build_synonym_table({"kubernetes": ["k8s", "kubernetes"]})
        resume = normalize_text("Deployed services on k8s")
        assert text_contains(resume, "Kubernetes", table)
        assert "kubernetes" not in SYNONYM_TABLE

    def test_appends_variants_to_existing_concept(self):
        table = build_synonym_table({"python": ["cpython"]})
        assert table["python"] == ("python", "py", "cpython")
        assert SYNONYM_TABLE["python"] == ("python", "py")

    def test_single_string_variant(self):
        table = build_synonym_table({"golang": "go"})
        assert table["golang"] == ("go",)

    def test_result_is_read_only(self):
        table = build_synonym_table()
        with pytest.raises(TypeError):
            table["rust"] = ("rust",)
