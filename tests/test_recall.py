from datetime import timedelta

import pytest

from memory_strategy.core.errors import InvalidArgumentError
from memory_strategy.domain.models import RecallQuery, RecallStrategy
from memory_strategy.domain.similarity import fuzzy_similarity
from memory_strategy.services.scoring import HYBRID_WEIGHTS, score_temporal_proximity


class TestExactMatch:
    def test_equal_content_scores_one(self, engine, make_record):
        engine.store(make_record("rec-1", "Remember the milk"))
        engine.store(make_record("rec-2", "Something else"))

        result = engine.recall(RecallQuery(query_text="remember THE milk", strategy=RecallStrategy.EXACT_MATCH))

        assert result.record_ids == ["rec-1"]
        assert result.relevance_scores["rec-1"] == 1.0
        assert result.strategy_used is RecallStrategy.EXACT_MATCH

    def test_tag_and_substring_scores(self, engine, make_record):
        engine.store(make_record("substring", "notes about python packaging"))
        engine.store(make_record("tagged", "unrelated content", tags=["Python"]))
        engine.store(make_record("exact", "python"))
        engine.store(make_record("miss", "rust notes"))

        result = engine.recall(RecallQuery(query_text="python", strategy=RecallStrategy.EXACT_MATCH))

        assert result.record_ids == ["exact", "tagged", "substring"]
        assert result.relevance_scores == {"exact": 1.0, "tagged": 0.9, "substring": 0.7}
        assert result.total_candidates == 4

    def test_blank_query_text_is_invalid(self, engine):
        with pytest.raises(InvalidArgumentError):
            engine.recall(RecallQuery(query_text="  ", strategy=RecallStrategy.EXACT_MATCH))


class TestFuzzyMatch:
    def test_scores_are_normalized_edit_similarity(self, engine, make_record):
        engine.store(make_record("close", "kitten"))
        engine.store(make_record("far", "xyz"))

        result = engine.recall(RecallQuery(query_text="sitting", strategy=RecallStrategy.FUZZY_MATCH))

        assert result.record_ids == ["close"]
        assert result.relevance_scores["close"] == pytest.approx(1 - 3 / 7)

    def test_blank_query_text_is_invalid(self, engine):
        with pytest.raises(InvalidArgumentError):
            engine.recall(RecallQuery(query_text="", strategy=RecallStrategy.FUZZY_MATCH))


class TestSemanticSimilarity:
    def test_ranks_by_rescaled_cosine(self, engine, make_record):
        engine.store(make_record("same", embedding=[1.0, 0.0]))
        engine.store(make_record("orthogonal", embedding=[0.0, 1.0]))
        engine.store(make_record("opposite", embedding=[-1.0, 0.0]))
        engine.store(make_record("no-embedding", "text only"))

        result = engine.recall(
            RecallQuery(query_embedding=[1.0, 0.0], strategy=RecallStrategy.SEMANTIC_SIMILARITY)
        )

        assert result.record_ids == ["same", "orthogonal"]
        assert result.relevance_scores["same"] == pytest.approx(1.0)
        assert result.relevance_scores["orthogonal"] == pytest.approx(0.5)
        assert result.total_candidates == 4

    def test_query_without_embedding_returns_nothing(self, engine, make_record):
        engine.store(make_record("rec-1", embedding=[0.1, 0.2]))

        result = engine.recall(RecallQuery(query_text="anything", strategy=RecallStrategy.SEMANTIC_SIMILARITY))

        assert result.records == []
        assert result.total_candidates == 1

    def test_mismatched_lengths_compare_prefix(self, engine, make_record):
        engine.store(make_record("long", embedding=[1.0, 2.0, 50.0]))

        result = engine.recall(
            RecallQuery(query_embedding=[1.0, 2.0], strategy=RecallStrategy.SEMANTIC_SIMILARITY)
        )

        assert result.relevance_scores["long"] == pytest.approx(1.0)


class TestTemporalProximity:
    def test_newest_one_oldest_zero_linear_between(self, engine, make_record):
        engine.store(make_record("old", age_days=3))
        engine.store(make_record("new", age_days=1))
        engine.store(make_record("mid", age_days=2))

        result = engine.recall(RecallQuery(strategy=RecallStrategy.TEMPORAL_PROXIMITY))

        assert result.record_ids == ["new", "mid", "old"]
        assert result.relevance_scores["new"] == pytest.approx(1.0)
        assert result.relevance_scores["mid"] == pytest.approx(0.5)
        assert result.relevance_scores["old"] == pytest.approx(0.0)

    def test_identical_ages_all_score_one(self, make_record, base_time):
        candidates = [make_record(f"r{i}", age_days=2) for i in range(3)]

        scores = score_temporal_proximity(candidates, now=base_time)

        assert scores == {"r0": 1.0, "r1": 1.0, "r2": 1.0}

    def test_empty_candidate_set(self, engine):
        result = engine.recall(RecallQuery(strategy=RecallStrategy.TEMPORAL_PROXIMITY))

        assert result.records == []
        assert result.total_candidates == 0
        assert result.relevance_scores == {}


class TestHybrid:
    def test_weighted_sum_of_components(self, engine, make_record):
        query_embedding = [0.2, 0.4, 0.6]
        engine.store(make_record("a", "alpha beta", age_days=1))
        engine.store(make_record("b", "gamma", age_days=30, embedding=list(query_embedding)))

        result = engine.recall(RecallQuery(query_text="alpha", query_embedding=query_embedding))

        # a: substring exact hit, fuzzy 0.5, no embedding, newest
        expected_a = 0.30 * 0.7 + 0.25 * fuzzy_similarity("alpha", "alpha beta") + 0.30 * 0.0 + 0.15 * 1.0
        # b: no exact hit, weak fuzzy, identical embedding, oldest
        expected_b = 0.30 * 0.0 + 0.25 * fuzzy_similarity("alpha", "gamma") + 0.30 * 1.0 + 0.15 * 0.0

        assert result.strategy_used is RecallStrategy.HYBRID
        assert result.relevance_scores["a"] == pytest.approx(expected_a)
        assert result.relevance_scores["b"] == pytest.approx(expected_b)
        assert expected_a == pytest.approx(0.485)
        assert expected_b == pytest.approx(0.35)
        assert result.record_ids == ["a", "b"]

    def test_weights_sum_to_one(self):
        assert sum(HYBRID_WEIGHTS.values()) == pytest.approx(1.0)

    def test_blank_text_still_scores_exact_and_fuzzy_terms(self, engine, make_record):
        engine.store(make_record("only", "some content", age_days=1, embedding=[1.0, 0.0]))

        result = engine.recall(RecallQuery(query_embedding=[1.0, 0.0]))

        # contains-match 0.7, no fuzzy overlap, identical embedding, sole candidate
        assert result.relevance_scores["only"] == pytest.approx(0.30 * 0.7 + 0.30 * 1.0 + 0.15 * 1.0)

    def test_blank_text_fully_matches_empty_content(self, engine, make_record):
        engine.store(make_record("empty", "", age_days=1))

        result = engine.recall(RecallQuery())

        assert result.relevance_scores["empty"] == pytest.approx(0.30 * 1.0 + 0.25 * 1.0 + 0.15 * 1.0)


class TestRankingAndFiltering:
    def test_ties_keep_store_order(self, engine, make_record):
        for record_id in ["first", "second", "third"]:
            engine.store(make_record(record_id, "same text"))

        result = engine.recall(RecallQuery(query_text="same text", strategy=RecallStrategy.EXACT_MATCH))

        assert result.record_ids == ["first", "second", "third"]

    def test_max_results_truncates(self, engine, make_record):
        for i in range(5):
            engine.store(make_record(f"r{i}", "match"))

        result = engine.recall(RecallQuery(query_text="match", strategy=RecallStrategy.EXACT_MATCH, max_results=2))

        assert result.record_ids == ["r0", "r1"]
        assert result.total_candidates == 5

    def test_min_relevance_excludes_low_scores(self, engine, make_record):
        engine.store(make_record("exact", "python"))
        engine.store(make_record("partial", "python tips"))

        result = engine.recall(
            RecallQuery(query_text="python", strategy=RecallStrategy.EXACT_MATCH, min_relevance=0.8)
        )

        assert result.record_ids == ["exact"]
        assert "partial" not in result.relevance_scores

    def test_time_window_limits_candidates(self, engine, make_record):
        engine.store(make_record("recent", "report", age_days=1))
        engine.store(make_record("ancient", "report", age_days=40))

        result = engine.recall(
            RecallQuery(query_text="report", strategy=RecallStrategy.EXACT_MATCH, time_window=timedelta(days=7))
        )

        assert result.record_ids == ["recent"]
        assert result.total_candidates == 1

    @pytest.mark.parametrize("strategy", list(RecallStrategy))
    def test_scores_stay_in_unit_interval(self, engine, make_record, strategy):
        engine.store(make_record("a", "alpha", age_days=1, embedding=[3.0, -4.0], tags=["alpha"]))
        engine.store(make_record("b", "alphabet soup", age_days=9, embedding=[-3.0, 4.0]))
        engine.store(make_record("c", "", age_days=4))

        result = engine.recall(RecallQuery(query_text="alpha", query_embedding=[3.0, -4.0, 1.0], strategy=strategy))

        assert all(0.0 <= score <= 1.0 for score in result.relevance_scores.values())
        scores = [result.relevance_scores[record_id] for record_id in result.record_ids]
        assert scores == sorted(scores, reverse=True)

    @pytest.mark.parametrize(
        "query",
        [
            RecallQuery(query_text="x", max_results=0),
            RecallQuery(query_text="x", min_relevance=float("nan")),
            RecallQuery(query_text="x", time_window=timedelta(days=-1)),
        ],
    )
    def test_invalid_queries(self, engine, query):
        with pytest.raises(InvalidArgumentError):
            engine.recall(query)


class TestAccessBookkeeping:
    def test_recall_bumps_access_stats(self, engine, make_record):
        engine.store(make_record("rec-1", "hello", age_days=2))
        before = engine.get("rec-1")

        result = engine.recall(RecallQuery(query_text="hello", strategy=RecallStrategy.EXACT_MATCH))

        after = engine.get("rec-1")
        assert after.access_count == before.access_count + 1
        assert after.last_accessed_at > before.last_accessed_at
        assert result.records[0].access_count == 1

    def test_unreturned_records_are_untouched(self, engine, make_record):
        engine.store(make_record("hit", "hello"))
        engine.store(make_record("miss", "goodbye"))

        engine.recall(RecallQuery(query_text="hello", strategy=RecallStrategy.EXACT_MATCH))

        assert engine.get("miss").access_count == 0

    def test_recall_by_tags_bumps_access_stats(self, engine, make_record):
        engine.store(make_record("rec-1", tags=["ops"], age_days=1))

        engine.recall_by_tags(["OPS"])
        engine.recall_by_tags(["ops"])

        assert engine.get("rec-1").access_count == 2

    def test_recall_recent_is_a_pure_read(self, engine, make_record):
        engine.store(make_record("rec-1", age_days=1))
        before = engine.get("rec-1")

        engine.recall_recent(5)

        after = engine.get("rec-1")
        assert after.access_count == before.access_count
        assert after.last_accessed_at == before.last_accessed_at

    def test_recall_recent_returns_detached_copies(self, engine, make_record):
        engine.store(make_record("rec-1", "original", age_days=1))

        engine.recall_recent(5)[0].content = "mutated"

        assert engine.get("rec-1").content == "original"


class TestRecallByTags:
    def test_orders_by_match_count_then_importance(self, engine, make_record):
        engine.store(make_record("one-low", tags=["ops"], importance=0.1))
        engine.store(make_record("two", tags=["ops", "deploy"], importance=0.2))
        engine.store(make_record("one-high", tags=["Deploy"], importance=0.9))
        engine.store(make_record("none", tags=["misc"], importance=1.0))

        records = engine.recall_by_tags(["ops", "deploy"])

        assert [r.record_id for r in records] == ["two", "one-high", "one-low"]

    def test_max_results(self, engine, make_record):
        for i in range(4):
            engine.store(make_record(f"r{i}", tags=["t"]))

        assert len(engine.recall_by_tags(["t"], max_results=2)) == 2

    def test_no_matches_is_empty_not_error(self, engine, make_record):
        engine.store(make_record("r", tags=["a"]))

        assert engine.recall_by_tags(["b"]) == []

    def test_empty_tag_list_is_invalid(self, engine):
        with pytest.raises(InvalidArgumentError):
            engine.recall_by_tags([])


class TestRecallRecent:
    def test_orders_by_last_access_then_creation(self, engine, make_record):
        engine.store(make_record("oldest", "zzz", age_days=10))
        engine.store(make_record("middle", age_days=5))
        engine.store(make_record("newest", age_days=1))

        engine.recall(RecallQuery(query_text="zzz", strategy=RecallStrategy.EXACT_MATCH))

        records = engine.recall_recent(3)

        assert [r.record_id for r in records] == ["oldest", "newest", "middle"]

    def test_count_limits_results(self, engine, make_record):
        for i in range(5):
            engine.store(make_record(f"r{i}", age_days=i))

        assert [r.record_id for r in engine.recall_recent(2)] == ["r0", "r1"]

    def test_invalid_count(self, engine):
        with pytest.raises(InvalidArgumentError):
            engine.recall_recent(0)
