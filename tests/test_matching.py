from manuscript_engine.clusters import ClusterTable, KeywordCluster, default_cluster_table
from manuscript_engine.matching import OccurrenceIndex, keyword_pattern, match, match_cluster
from tests.utils import SAMPLE_SENTENCE


def test_whole_word_matching_respects_boundaries():
    cluster = KeywordCluster(name="love", group="theme", keywords=("love",))

    hits = match_cluster("Love, glove and beloved. LOVE!", cluster)

    assert [hit.char_offset for hit in hits] == [0, 25]


def test_stem_matching_accepts_suffixes():
    cluster = KeywordCluster(name="touch", group="sense", keywords=("grip",), stem=True)

    hits = match_cluster("gripping grips grip ungrip", cluster)

    assert len(hits) == 3


def test_phrase_matching_tolerates_whitespace_runs():
    pattern = keyword_pattern("break free")

    assert pattern.search("to BREAK   free of it")
    assert pattern.search("to break\nfree")


def test_match_returns_every_cluster_sorted_by_offset():
    clusters = [
        KeywordCluster(name="a", group="theme", keywords=("sea", "ship")),
        KeywordCluster(name="b", group="theme", keywords=("zebra",)),
    ]

    result = match("The ship left the sea and the ship returned.", clusters)

    assert list(result) == ["a", "b"]
    assert [hit.keyword for hit in result["a"]] == ["ship", "sea", "ship"]
    assert result["b"] == []


def test_example_sentence_theme_and_sensory_hits():
    index = OccurrenceIndex.build(SAMPLE_SENTENCE, default_cluster_table())

    love = index.distinct_keywords("Love & Connection")
    assert "love" in love
    assert "heart" in love
    assert "fear" in index.distinct_keywords("Hope & Despair")
    assert index.count("touch") >= 1
    assert index.count("sound") >= 1


def test_index_range_queries():
    table = ClusterTable([KeywordCluster(name="x", group="theme", keywords=("ox",))])
    text = "ox ox ox ox"
    index = OccurrenceIndex.build(text, table)

    assert index.count("x") == 4
    assert index.count_in_range("x", 0, 5) == 2
    assert index.count_in_range("x", 3, 4) == 1
    assert index.in_range("missing", 0, 100) == ()
    assert index.group_counts("theme") == {"x": 4}
    assert index.keyword_counts("x") == {"ox": 4}
