"""Tests for the extraction strategies and the chain runner."""

from decimal import Decimal

import pytest

from pricefetch.fetchers.base import ExtractionContext
from pricefetch.fetchers.site_config import SiteConfiguration
from pricefetch.fetchers.sites import generic, hepsiburada, n11, trendyol
from pricefetch.fetchers.strategies import Strategy, run_chain
from pricefetch.fetchers.strategies.heuristics import (
    context_anchor,
    heuristic_style,
    related_elements,
    structural_pattern,
    text_proximity,
)
from pricefetch.fetchers.strategies.meta_tags import meta_tags, microdata
from pricefetch.fetchers.strategies.scoring import MAX, SUM, ScoreBoard, keyword_score
from pricefetch.fetchers.strategies.selectors import configured_selectors, primary_selectors
from pricefetch.fetchers.strategies.structured_data import inline_script, structured_data
from pricefetch.fetchers.strategies.text import free_text


def make_context(html: str, url: str = "https://shop.example.com/p/1") -> ExtractionContext:
    return ExtractionContext(url=url, html=html)


@pytest.fixture
def config() -> SiteConfiguration:
    return SiteConfiguration()


# ============================================================================
# TESTS: STRUCTURED DATA
# ============================================================================


class TestStructuredData:
    """Test JSON-LD and inline script extraction."""

    def test_product_offer(self, json_ld_html, config):
        """Test price nested under Product.offers."""
        assert structured_data(make_context(json_ld_html), config) == Decimal("1200")

    def test_graph_with_aggregate_offer(self, config):
        """Test @graph containers and lowPrice on AggregateOffer."""
        html = """
        <script type="application/ld+json">
        {"@graph": [
            {"@type": "BreadcrumbList", "itemListElement": []},
            {"@type": "Product", "offers": {"@type": "AggregateOffer", "lowPrice": "899.90"}}
        ]}
        </script>
        """
        assert structured_data(make_context(html), config) == Decimal("899.90")

    def test_price_specification(self, config):
        """Test Offer.priceSpecification is consulted."""
        html = """
        <script type="application/ld+json">
        {"@type": "Offer", "priceSpecification": {"@type": "UnitPriceSpecification", "price": 75.5}}
        </script>
        """
        assert structured_data(make_context(html), config) == Decimal("75.5")

    def test_malformed_json_is_scanned(self, config):
        """Test a block with a trailing comma still yields its price."""
        html = """
        <script type="application/ld+json">
        {"@type": "Product", "offers": {"price": "1299.90",}}
        </script>
        """
        assert structured_data(make_context(html), config) == Decimal("1299.90")

    def test_non_finite_price_skipped(self, config):
        """Test a NaN price does not stop the search for a later offer."""
        html = """
        <script type="application/ld+json">
        [{"@type": "Offer", "price": NaN},
         {"@type": "Product", "offers": {"@type": "Offer", "price": 1200}}]
        </script>
        """
        assert structured_data(make_context(html), config) == Decimal("1200")

    def test_untyped_objects_ignored(self, config):
        """Test prices outside Product/Offer nodes are not used."""
        html = """
        <script type="application/ld+json">
        {"@type": "Organization", "value": 500}
        </script>
        """
        assert structured_data(make_context(html), config) is None

    def test_disabled(self, json_ld_html):
        """Test the enable_structured_data switch."""
        config = SiteConfiguration(enable_structured_data=False)
        assert structured_data(make_context(json_ld_html), config) is None

    def test_inline_script_state(self, config):
        """Test currentPrice assigned in inline page state."""
        html = """
        <script src="/static/app.js"></script>
        <script>window.__STATE__ = {"product": {"currentPrice": 849.9}};</script>
        """
        assert inline_script(make_context(html), config) == Decimal("849.9")

    def test_inline_script_skips_json_ld(self, json_ld_html, config):
        """Test JSON-LD blocks are left to the structured data strategy."""
        assert inline_script(make_context(json_ld_html), config) is None


# ============================================================================
# TESTS: META TAGS AND MICRODATA
# ============================================================================


class TestMetaTags:
    """Test meta tag and microdata extraction."""

    def test_product_price_amount(self, meta_price_html, config):
        """Test product:price:amount meta tag."""
        assert meta_tags(make_context(meta_price_html), config) == Decimal("49.99")

    def test_twitter_card_label(self, config):
        """Test twitter:data1 paired with a price label."""
        html = """
        <head>
          <meta name="twitter:label1" content="Price">
          <meta name="twitter:data1" content="$19.99">
        </head>
        """
        assert meta_tags(make_context(html), config) == Decimal("19.99")

    def test_disabled(self, meta_price_html):
        """Test the enable_meta_tags switch."""
        config = SiteConfiguration(enable_meta_tags=False)
        assert meta_tags(make_context(meta_price_html), config) is None

    def test_microdata_content_wins(self, config):
        """Test itemprop content attribute takes precedence over text."""
        html = '<div itemscope><span itemprop="price" content="15.50">15,00 €</span></div>'
        assert microdata(make_context(html), config) == Decimal("15.50")

    def test_microdata_text(self, config):
        """Test itemprop element text when no content attribute exists."""
        html = '<div itemscope><span itemprop="price">1.299,00 TL</span></div>'
        assert microdata(make_context(html), config) == Decimal("1299.00")


# ============================================================================
# TESTS: SELECTORS
# ============================================================================


class TestSelectors:
    """Test configured CSS selector strategies."""

    def test_primary_selector_in_order(self):
        """Test selectors are tried in declaration order."""
        config = SiteConfiguration(price_selectors=(".missing", ".price", ".amount"))
        html = '<div class="amount">10,00</div><div class="price">1.299,00 TL</div>'
        assert primary_selectors(make_context(html), config) == Decimal("1299.00")

    def test_fallback_selectors(self):
        """Test fallback selectors only run in the configured strategy."""
        config = SiteConfiguration(price_selectors=(".price",), fallback_selectors=(".amount",))
        context = make_context('<span class="amount">45,90</span>')

        assert primary_selectors(context, config) is None
        assert configured_selectors(context, config) == Decimal("45.90")

    def test_data_price_attribute(self):
        """Test attribute fallback when the element has no text."""
        config = SiteConfiguration(price_selectors=(".price",))
        html = '<div class="price" data-price="99.90"></div>'
        assert primary_selectors(make_context(html), config) == Decimal("99.90")

    def test_invalid_selector_skipped(self):
        """Test a malformed selector does not stop the strategy."""
        config = SiteConfiguration(price_selectors=("[unclosed", ".price"))
        html = '<div class="price">250,00</div>'
        assert primary_selectors(make_context(html), config) == Decimal("250.00")

    def test_out_of_bounds_candidates_skipped(self):
        """Test candidates outside the sanity bounds are discarded."""
        config = SiteConfiguration(price_selectors=(".price",))
        html = '<div class="price">0</div><div class="price">250.000,00</div>'
        assert primary_selectors(make_context(html), config) is None


# ============================================================================
# TESTS: HEURISTICS
# ============================================================================


class TestHeuristics:
    """Test scoring heuristics and context anchors."""

    def test_style_prefers_phrase_context(self, config):
        """Test a heading under a 'sepete özel' parent beats a plain span."""
        html = """
        <div class="x1"><span class="a9">1.499,00 TL</span></div>
        <div class="x2">Sepete özel <h2 class="k3">1.299,00 TL</h2></div>
        """
        assert heuristic_style(make_context(html), config) == Decimal("1299.00")

    def test_structural_sums_selector_hits(self, config):
        """Test a price hit by several structural selectors wins."""
        html = """
        <div class="product-price">899,90 TL</div>
        <div class="special-price">749,90 TL</div>
        <div class="old-price">1.199,90 TL</div>
        """
        assert structural_pattern(make_context(html), config) == Decimal("749.90")

    def test_text_proximity_ranks_patterns(self, config):
        """Test the 'sepete özel' amount outranks the list price."""
        html = """
        <p>Liste fiyatı 1.499,00 TL</p>
        <p>Sepete özel fiyat 1.299,00 TL</p>
        """
        assert text_proximity(make_context(html), config) == Decimal("1299.00")

    def test_context_anchor_phrase(self):
        """Test the price next to a keyword phrase is chosen."""
        html = """
        <div class="z9"><span>1.499,00 TL</span></div>
        <div class="a1">
          <div class="b2"><span class="c3">Sepete özel fiyat</span></div>
          <div class="b4"><span class="c5">1.249,00 TL</span></div>
        </div>
        """
        config = hepsiburada.HEPSIBURADA_CONFIG
        assert context_anchor(make_context(html), config) == Decimal("1249.00")

    def test_context_anchor_currency_marker(self):
        """Test the currency marker fallback when no phrase is present."""
        html = "<div><p>Şimdi 2.199,90 TL</p></div>"
        config = hepsiburada.HEPSIBURADA_CONFIG
        assert context_anchor(make_context(html), config) == Decimal("2199.90")

    def test_related_elements_order(self):
        """Test parent subtree, then grandparent subtree, then siblings."""
        html = """
        <section id="gp">
          <div id="p"><span id="anchor">x</span><em id="sib">y</em></div>
          <div id="uncle"></div>
        </section>
        """
        context = make_context(html)
        anchor = context.document.select_one("#anchor")

        ids = [el.get("id") for el in related_elements(anchor)]

        assert ids == ["p", "anchor", "sib", "gp", "uncle"]

    def test_scripts_ignored(self, config):
        """Test prices inside scripts are not visible to heuristics."""
        html = "<script>var p = '1.299,00 TL';</script><p>Stokta yok</p>"
        context = make_context(html)

        assert heuristic_style(context, config) is None
        assert text_proximity(context, config) is None


# ============================================================================
# TESTS: FREE TEXT
# ============================================================================


class TestFreeText:
    """Test the free-text fallback."""

    def test_dollar_prefixed(self, free_text_html):
        """Test a $-prefixed amount in a paragraph."""
        config = generic.GENERIC_CONFIG
        assert free_text(make_context(free_text_html), config) == Decimal("1299.99")

    def test_tl_suffixed(self, config):
        """Test a TL-suffixed amount."""
        assert free_text(make_context("<p>Toplam 349,90 TL</p>"), config) == Decimal("349.90")

    @pytest.mark.parametrize(
        "html,expected",
        [
            ("<p>Now $1299.99</p>", Decimal("1299.99")),
            ("<p>Only 1299 TL</p>", Decimal("1299")),
            ("<p>€2499</p>", Decimal("2499")),
            ("<p>Price: 1299.99</p>", Decimal("1299.99")),
        ],
    )
    def test_ungrouped_amounts(self, html, expected):
        """Test amounts of 1000 or more written without thousands separators."""
        assert free_text(make_context(html), generic.GENERIC_CONFIG) == expected

    def test_usd_suffix_reads_whole_number(self, config):
        """Test a USD-suffixed amount is not cut down to its last digits."""
        assert free_text(make_context("<p>Total 1299.99 USD</p>"), config) == Decimal("1299.99")

    def test_script_text_ignored(self, config):
        """Test amounts inside scripts are not visible text."""
        assert free_text(make_context('<script>var p = "$5.00";</script><p>none</p>'), config) is None


# ============================================================================
# TESTS: SCORING
# ============================================================================


class TestScoreBoard:
    """Test candidate ranking."""

    def test_sum_aggregation(self):
        """Test repeated sightings add up."""
        board = ScoreBoard(SUM)
        board.add(Decimal("10"), 5)
        board.add(Decimal("20"), 8)
        board.add(Decimal("10"), 5)

        assert board.best() == Decimal("10")
        assert len(board) == 2

    def test_max_aggregation(self):
        """Test repeated sightings keep the highest score."""
        board = ScoreBoard(MAX)
        board.add(Decimal("10"), 5)
        board.add(Decimal("20"), 8)
        board.add(Decimal("10"), 5)

        assert board.best() == Decimal("20")

    def test_tie_goes_to_first_seen(self):
        """Test equal scores resolve to the first price added."""
        board = ScoreBoard()
        board.add(Decimal("30"), 4)
        board.add(Decimal("40"), 4)

        assert board.best() == Decimal("30")

    def test_empty(self):
        """Test an empty board has no winner."""
        assert ScoreBoard().best() is None

    def test_keyword_score(self):
        """Test each keyword group counts once."""
        weights = {("price", "cost"): 10, ("special",): 5}
        assert keyword_score("special-price price-cost", weights) == 15
        assert keyword_score("", weights) == 0


# ============================================================================
# TESTS: CHAIN RUNNER
# ============================================================================


class TestRunChain:
    """Test run_chain ordering, isolation and bounds."""

    def test_failing_strategy_does_not_stop_chain(self, config):
        """Test an exception in one strategy falls through to the next."""
        boom = Strategy("boom", lambda context, cfg: 1 / 0)
        ten = Strategy("ten", lambda context, cfg: Decimal("10"))

        outcome = run_chain((boom, ten), make_context("<p></p>"), config)

        assert outcome.price == Decimal("10")
        assert outcome.strategy == "ten"
        assert outcome.attempted == ("boom", "ten")

    def test_out_of_bounds_value_discarded(self, config):
        """Test a value below min_price is skipped."""
        tiny = Strategy("tiny", lambda context, cfg: Decimal("0.5"))
        five = Strategy("five", lambda context, cfg: Decimal("5"))

        outcome = run_chain((tiny, five), make_context("<p></p>"), config)

        assert outcome.price == Decimal("5")
        assert outcome.strategy == "five"

    def test_nothing_found(self, config):
        """Test an exhausted chain reports every strategy attempted."""
        empty = Strategy("empty", lambda context, cfg: None)

        outcome = run_chain((empty,), make_context("<p></p>"), config)

        assert not outcome.found
        assert outcome.strategy is None
        assert outcome.attempted == ("empty",)

    @pytest.mark.parametrize(
        "profile",
        [trendyol.PROFILE, hepsiburada.PROFILE, n11.PROFILE, generic.PROFILE],
        ids=lambda p: p.name,
    )
    def test_every_profile_reads_json_ld(self, profile, json_ld_html):
        """Test JSON-LD price is found by every built-in profile's chain."""
        outcome = run_chain(profile.strategies, make_context(json_ld_html), profile.config)

        assert outcome.price == Decimal("1200")
        assert outcome.strategy == "structured_data"

    def test_idempotent(self):
        """Test the same markup gives the same price on repeated runs."""
        html = """
        <html><body>
        <div class="x2">Sepete özel <h2>1.299,00 TL</h2></div>
        <p>Liste fiyatı 1.499,00 TL</p>
        </body></html>
        """
        context = make_context(html)
        profile = hepsiburada.PROFILE

        first = run_chain(profile.strategies, context, profile.config)
        second = run_chain(profile.strategies, context, profile.config)
        fresh = run_chain(profile.strategies, make_context(html), profile.config)

        assert first.price == second.price == fresh.price == Decimal("1299.00")
        assert context.html == html
