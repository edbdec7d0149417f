from collections import Counter

from src.news.clustering import cluster_stories, significant_words, top_catalysts
from src.news.models import NewsItem, TaggedNewsItem

_seq = 0


def story(title, catalysts=(), url=None):
    global _seq
    _seq += 1
    return TaggedNewsItem(
        item=NewsItem(title=title, url=url or f"https://news.example/{_seq}"),
        catalysts=tuple(catalysts),
    )


def test_significant_words_strip_punctuation_and_short_tokens():
    assert significant_words("Tech Earnings Beat Expectations!") == ["earnings", "expectations"]
    assert significant_words("U.S. stocks: record-high close") == ["stocks", "record", "close"]
    assert significant_words("") == []
    assert significant_words(None) == []


def test_empty_input_gives_no_clusters():
    assert cluster_stories([]) == []


def test_single_item_forms_one_cluster():
    s = story("Nvidia shares climb after strong demand")
    clusters = cluster_stories([s])
    assert len(clusters) == 1
    assert clusters[0].key == "nvidia"
    assert clusters[0].size == 1
    assert clusters[0].stories == [s]


def test_earnings_scenario():
    a = story("Tech Earnings Beat Expectations", ["earnings"])
    b = story("Tech Earnings Report Strong Growth", ["earnings", "guidance"])
    c = story("Oil Prices Surge on Supply Concerns", ["macro"])
    clusters = cluster_stories([a, b, c])

    assert [cl.size for cl in clusters] == [2, 1]
    assert clusters[0].key == "earnings"
    assert clusters[0].stories == [a, b]
    assert clusters[0].top_catalysts == ["earnings", "guidance"]
    assert clusters[1].key == "prices"
    assert clusters[1].stories == [c]
    assert clusters[1].top_catalysts == ["macro"]


def test_unrelated_titles_stay_apart():
    clusters = cluster_stories([story("Fed Raises Rates Today"), story("Apple Unveils New iPhone")])
    assert len(clusters) == 2
    assert {c.key for c in clusters} == {"raises", "apple"}


def test_shared_words_join_same_cluster():
    a = story("Quarterly earnings surprise")
    b = story("Quarterly earnings season")
    clusters = cluster_stories([a, b])
    assert len(clusters) == 1
    assert clusters[0].key == "quarterly"
    assert clusters[0].stories == [a, b]


def test_score_exactly_at_threshold_does_not_join():
    seed = story("Stocks rally")
    # 3 of 10 significant words hit the "stocks" key: 0.3 is not above the threshold
    at = story("bravo stocks stocks stocks delta gamma kappa sigma omega theta")
    # 4 of 10 clears it
    above = story("lemon stocks stocks stocks stocks gamma kappa sigma omega theta")
    clusters = cluster_stories([seed, at, above])
    by_key = {c.key: c for c in clusters}
    assert set(by_key) == {"stocks", "bravo"}
    assert by_key["stocks"].stories == [seed, above]
    assert by_key["bravo"].stories == [at]


def test_ties_go_to_earliest_created_cluster():
    z = story("Zebra crossing")
    t = story("Tiger economy")
    both = story("Tiger zebra")
    clusters = cluster_stories([z, t, both])
    by_key = {c.key: c for c in clusters}
    assert by_key["zebra"].stories == [z, both]
    assert by_key["tiger"].stories == [t]


def test_items_without_significant_words_share_other_bucket():
    a = story("Fed up")
    b = story("AI is hot")
    clusters = cluster_stories([a, b])
    assert len(clusters) == 1
    assert clusters[0].key == "other"
    assert clusters[0].stories == [a, b]


def test_fallback_key_reuses_existing_cluster():
    # second title scores 1/4 against "earnings" but its first word is also "earnings"
    a = story("Earnings Beat")
    b = story("Earnings Report Strong Growth")
    clusters = cluster_stories([a, b])
    assert len(clusters) == 1
    assert clusters[0].stories == [a, b]


def test_equal_sizes_keep_creation_order():
    items = [
        story("Alpha launches widget"),
        story("Bravo merger closes"),
        story("Charlie cuts jobs"),
        story("Charlie cuts more"),
    ]
    clusters = cluster_stories(items)
    assert [c.key for c in clusters] == ["charlie", "alpha", "bravo"]


def test_every_item_lands_in_exactly_one_cluster():
    titles = [
        "Apple earnings beat estimates",
        "Apple earnings preview",
        "Microsoft cloud growth slows",
        "Fed up",
        "Crude inventories rise",
        "Crude output cut",
        "",
        "Microsoft cloud margins",
    ]
    items = [story(t) for t in titles]
    clusters = cluster_stories(items)
    seen = Counter(s.url for c in clusters for s in c.stories)
    assert seen == Counter(i.url for i in items)
    assert sum(c.size for c in clusters) == len(items)
    sizes = [c.size for c in clusters]
    assert sizes == sorted(sizes, reverse=True)


def test_top_catalysts_limits_and_ordering():
    stories = [
        story("a", ["macro", "earnings"]),
        story("b", ["earnings", "product"]),
        story("c", ["regulation"]),
    ]
    assert top_catalysts(stories) == ["earnings", "macro", "product"]
    assert top_catalysts([story("d")]) == []


def test_top_catalysts_only_from_members():
    clusters = cluster_stories([
        story("Earnings season begins", ["earnings"]),
        story("Merger wave continues", ["m-a", "macro", "product", "regulation"]),
    ])
    for c in clusters:
        members = {cat for s in c.stories for cat in s.catalysts}
        assert len(c.top_catalysts) <= 3
        assert set(c.top_catalysts) <= members
