"""Tests for buenos_dias.database module."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest
from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import ConnectionFailure, OperationFailure

from buenos_dias.database import ArticleStore
from buenos_dias.errors import ConfigurationError
from buenos_dias.models import DailyBundle

T0 = datetime(2025, 11, 18, 12, 0, tzinfo=timezone.utc)


class UrlKeyedCollection:
    """Minimal in-memory stand-in for the articles collection."""

    def __init__(self):
        self.docs = {}

    def find_one_and_update(self, filter, update, upsert=False, return_document=None):
        url = filter["url"]
        doc = self.docs.get(url)
        if doc is None:
            doc = {"_id": ObjectId()}
            self.docs[url] = doc
        doc.update(update["$set"])
        return dict(doc)


@pytest.fixture
def store():
    store = ArticleStore(MagicMock(), db_name="test_db")
    store.articles = MagicMock()
    store.bundles = MagicMock()
    return store


class TestUpsertArticle:
    def test_upserts_by_url_and_refreshes_scraped_at(self, store, make_article) -> None:
        article = make_article(id=None)
        store.articles.find_one_and_update.side_effect = lambda f, u, **kw: {"_id": "abc", **u["$set"]}

        with patch("buenos_dias.database.utcnow", return_value=T0):
            saved = store.upsert_article(article)

        filter_, update = store.articles.find_one_and_update.call_args.args
        kwargs = store.articles.find_one_and_update.call_args.kwargs
        assert filter_ == {"url": article.url}
        assert update["$set"]["scraped_at"] == T0
        assert "id" not in update["$set"]
        assert kwargs == {"upsert": True, "return_document": ReturnDocument.AFTER}
        assert saved.id == "abc"
        assert saved.scraped_at == T0

    def test_same_url_twice_keeps_one_record(self, store, make_article) -> None:
        store.articles = UrlKeyedCollection()
        article = make_article(url="https://x.com/culture/same", id=None)

        with patch("buenos_dias.database.utcnow", return_value=T0):
            first = store.upsert_article(article)
        later = T0 + timedelta(hours=3)
        with patch("buenos_dias.database.utcnow", return_value=later):
            second = store.upsert_article(article.model_copy(update={"title": "Updated"}))

        assert len(store.articles.docs) == 1
        assert first.id == second.id
        assert second.title == "Updated"
        assert second.scraped_at == later

    def test_save_articles_skips_failed_writes(self, store, make_article) -> None:
        articles = [make_article(url=f"https://x.com/culture/{i}") for i in range(3)]

        def write(filter_, update, **kwargs):
            if filter_["url"].endswith("/1"):
                raise OperationFailure("write failed")
            return {"_id": "x", **update["$set"]}

        store.articles.find_one_and_update.side_effect = write
        saved = store.save_articles(articles)
        assert [a.url for a in saved] == ["https://x.com/culture/0", "https://x.com/culture/2"]


class TestReadRecent:
    def test_filters_window_and_orders(self, store, make_article) -> None:
        doc = {"_id": "1", **make_article().to_document()}
        cursor = store.articles.find.return_value
        cursor.sort.return_value.limit.return_value = [doc]

        with patch("buenos_dias.database.utcnow", return_value=T0):
            result = store.read_recent(hours=24, limit=5)

        store.articles.find.assert_called_once_with({"scraped_at": {"$gt": T0 - timedelta(hours=24)}})
        cursor.sort.assert_called_once_with([("published_at", DESCENDING), ("scraped_at", DESCENDING)])
        cursor.sort.return_value.limit.assert_called_once_with(5)
        assert [a.id for a in result] == ["1"]


class TestBundles:
    def test_append_assigns_id(self, store) -> None:
        store.bundles.insert_one.return_value.inserted_id = ObjectId("64b7f0c2a1b2c3d4e5f60718")
        bundle = DailyBundle(headline="Hello")

        stored = store.append_bundle(bundle)

        doc = store.bundles.insert_one.call_args.args[0]
        assert doc["headline"] == "Hello"
        assert doc["published"] is False
        assert isinstance(doc["date"], str)
        assert stored.id == "64b7f0c2a1b2c3d4e5f60718"

    def test_read_latest(self, store) -> None:
        doc = {"_id": ObjectId(), **DailyBundle(headline="Latest").to_document()}
        store.bundles.find_one.return_value = doc

        bundle = store.read_latest_bundle()

        assert bundle.headline == "Latest"
        assert bundle.id == str(doc["_id"])
        store.bundles.find_one.assert_called_once_with({}, sort=[("processed_at", DESCENDING)])

    def test_read_latest_empty(self, store) -> None:
        store.bundles.find_one.return_value = None
        assert store.read_latest_bundle() is None

    def test_mark_latest_published(self, store) -> None:
        store.bundles.find_one.return_value = {"_id": "b1"}
        assert store.mark_latest_published() is True
        store.bundles.update_one.assert_called_once_with({"_id": "b1"}, {"$set": {"published": True}})

    def test_mark_latest_published_without_bundle(self, store) -> None:
        store.bundles.find_one.return_value = None
        assert store.mark_latest_published() is False
        store.bundles.update_one.assert_not_called()


class TestConnection:
    def test_missing_uri(self) -> None:
        with pytest.raises(ConfigurationError):
            ArticleStore.connect(None)

    @patch("buenos_dias.database.MongoClient")
    def test_unreachable_raises_configuration_error(self, mock_client_cls) -> None:
        mock_client_cls.return_value.admin.command.side_effect = ConnectionFailure("refused")
        with pytest.raises(ConfigurationError):
            ArticleStore.connect("mongodb://localhost:27017")
        mock_client_cls.return_value.close.assert_called_once()

    @patch("buenos_dias.database.MongoClient")
    def test_connect_creates_indexes(self, mock_client_cls) -> None:
        store = ArticleStore.connect("mongodb://localhost:27017", db_name="test_db")
        mock_client_cls.return_value.get_database.assert_called_once_with("test_db")
        assert store.articles.create_index.called

    def test_ping_failure(self, store) -> None:
        store.client.admin.command.side_effect = ConnectionFailure("down")
        assert store.ping() is False

    def test_close_is_idempotent(self, store) -> None:
        client = store.client
        with store:
            pass
        store.close()
        client.close.assert_called_once()
