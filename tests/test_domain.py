"""
Domain Analyzer Tests — URL trust verdicts.
"""

from darkshield.domain import (
    DomainAnalyzer,
    domain_analyzer,
    has_common_typo,
    levenshtein,
    similarity,
)


def _types(verdict):
    return [t.type for t in verdict.threats]


class TestStringSimilarity:
    def test_levenshtein(self):
        assert levenshtein("kitten", "sitting") == 3
        assert levenshtein("", "abc") == 3
        assert levenshtein("abc", "") == 3
        assert levenshtein("same", "same") == 0

    def test_levenshtein_symmetric(self):
        for a, b in (("amazon", "amaz0n"), ("paypal.com", "pay-pal.net"), ("", "x")):
            assert levenshtein(a, b) == levenshtein(b, a)

    def test_similarity_identity(self):
        assert similarity("paypal", "paypal") == 1.0
        assert similarity("", "") == 1.0

    def test_similarity_range(self):
        value = similarity("amaz0n", "amazon")
        assert 0.0 <= value <= 1.0
        assert similarity("amaz0n", "amazon") == similarity("amazon", "amaz0n")

    def test_common_typo_substitution(self):
        assert has_common_typo("paypa1.com", "paypal.com") is True
        assert has_common_typo("arnazon.in", "amazon.in") is True

    def test_substitution_replaces_every_occurrence(self):
        # m -> rn also rewrites the m in ".com"
        assert has_common_typo("rnicrosoft.com", "microsoft.com") is False
        assert has_common_typo("rnicrosoft.corn", "microsoft.com") is True

    def test_common_typo_insert_or_delete(self):
        assert has_common_typo("gogle.com", "google.com") is True
        assert has_common_typo("gooogle.com", "google.com") is True

    def test_common_typo_transposition(self):
        assert has_common_typo("googel.com", "google.com") is True

    def test_not_a_typo(self):
        assert has_common_typo("example.org", "google.com") is False


class TestDomainAnalyzer:
    def test_legitimate_brand_domain(self):
        verdict = domain_analyzer.analyze("https://amazon.com")
        assert verdict.threat_level == 0
        assert verdict.is_phishing is False
        assert verdict.threats == []
        assert verdict.domain == "amazon.com"

    def test_typosquatting(self):
        verdict = domain_analyzer.analyze("https://amaz0n.com")
        assert verdict.threat_level == 90
        assert verdict.is_phishing is True
        assert _types(verdict) == ["Typosquatting", "Similar Domain Name"]
        assert "amazon.com" in verdict.threats[0].description

    def test_lookalike_substitution(self):
        verdict = domain_analyzer.analyze("https://paypa1.com/signin")
        assert verdict.threat_level == 90
        assert "Typosquatting" in _types(verdict)

    def test_lookalike_caught_by_similarity(self):
        verdict = domain_analyzer.analyze("https://rnicrosoft.com")
        assert verdict.threat_level == 90
        assert _types(verdict) == ["Typosquatting", "Similar Domain Name"]

    def test_suspicious_tld_and_subdomain(self):
        verdict = domain_analyzer.analyze("https://amazon-login.secure-verify.tk")
        assert verdict.threat_level == 85
        assert verdict.is_phishing is True
        assert _types(verdict) == ["Suspicious Domain Extension", "Suspicious Subdomain"]
        assert [t.severity for t in verdict.threats] == [60, 85]

    def test_tld_alone_is_not_phishing(self):
        verdict = domain_analyzer.analyze("https://my-recipes.tk")
        assert verdict.threat_level == 60
        assert verdict.is_phishing is False

    def test_brand_in_subdomain(self):
        verdict = domain_analyzer.analyze("https://paypal.secure-login.com")
        assert _types(verdict) == ["Suspicious Subdomain"]
        assert verdict.threats[0].description == 'Subdomain contains "paypal" but main domain is secure-login.com'

    def test_similar_name(self):
        verdict = domain_analyzer.analyze("https://faceb00k.net")
        assert _types(verdict) == ["Similar Domain Name"]
        assert verdict.threat_level == 75
        assert verdict.is_phishing is True

    def test_ip_host(self):
        verdict = domain_analyzer.analyze("http://192.168.1.1/login")
        assert _types(verdict) == ["IP Address"]
        assert verdict.threat_level == 70
        assert verdict.is_phishing is True

    def test_www_prefix_is_clean(self):
        verdict = domain_analyzer.analyze("https://www.google.com/search?q=shoes")
        assert verdict.threat_level == 0

    def test_host_is_lowercased(self):
        assert domain_analyzer.analyze("https://AMAZON.com").domain == "amazon.com"


class TestLocalFiles:
    def test_local_file(self):
        verdict = domain_analyzer.analyze("file:///home/user/page.html")
        assert verdict.threat_level == 85
        assert verdict.is_phishing is True
        assert verdict.domain == "file://"
        assert _types(verdict) == ["Local File Website"]

    def test_local_file_with_brand(self):
        verdict = domain_analyzer.analyze("file:///C:/Downloads/amazon-login.html")
        assert verdict.threat_level == 95
        assert _types(verdict) == ["Local File Website", "Brand Impersonation"]
        assert "amazon" in verdict.threats[1].description

    def test_first_brand_token_reported(self):
        verdict = domain_analyzer.analyze("FILE:///tmp/paypal_signin.html")
        assert verdict.threats[1].description.endswith("paypal")

    def test_check_local_file(self):
        assert domain_analyzer.check_local_file("file:///x.html").severity == 85
        assert domain_analyzer.check_local_file("https://x.com") is None


class TestUnusableInput:
    def test_empty(self):
        verdict = domain_analyzer.analyze("")
        assert verdict.threat_level == 0
        assert verdict.is_phishing is False

    def test_none(self):
        assert domain_analyzer.analyze(None).threat_level == 0

    def test_no_host(self):
        verdict = domain_analyzer.analyze("not a url")
        assert verdict.threat_level == 0
        assert verdict.domain == ""
        assert verdict.url == "not a url"

    def test_unparsable(self):
        assert domain_analyzer.analyze("http://[::1").threat_level == 0

    def test_to_dict(self):
        data = domain_analyzer.analyze("https://amaz0n.com").to_dict()
        assert data["threat_level"] == 90
        assert data["threats"][0]["severity"] == 90
        assert data["url"] == "https://amaz0n.com"


class TestCustomRegistry:
    def test_custom_brands(self):
        analyzer = DomainAnalyzer(brands={"acme": ("acme.in",)})
        assert analyzer.analyze("https://acrne.in").threat_level == 90
        assert analyzer.analyze("https://amaz0n.com").threat_level == 0

    def test_lookalike_under_com_not_flagged(self):
        analyzer = DomainAnalyzer(brands={"acme": ("acme.com",)})
        assert analyzer.analyze("https://acrne.com").threat_level == 0

    def test_custom_tlds(self):
        analyzer = DomainAnalyzer(suspicious_tlds=(".zip",))
        assert _types(analyzer.analyze("https://invoice.zip")) == ["Suspicious Domain Extension"]
