import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument
from pymongo.errors import ConnectionFailure, PyMongoError

from .errors import ConfigurationError
from .models import DailyBundle, RawArticle

logger = logging.getLogger(__name__)


def utcnow():
    return datetime.now(timezone.utc)


class ArticleStore:
    """MongoDB-backed content store: articles keyed by url plus daily bundles.

    Construct once (``ArticleStore.connect``), pass it to whoever needs it and
    close it on shutdown; it is also a context manager.
    """

    def __init__(self, client, db_name='buenos_dias'):
        self.client = client
        self._db = client.get_database(db_name)
        self.articles = self._db.get_collection('articles')
        self.bundles = self._db.get_collection('processed_content')

    @classmethod
    def connect(cls, mongo_uri, db_name='buenos_dias', timeout_ms=5000):
        """Connect and ping; an unreachable or unconfigured store raises ConfigurationError."""
        if not mongo_uri:
            raise ConfigurationError("MONGO_URI configuration is missing")

        client = MongoClient(mongo_uri, serverSelectionTimeoutMS=timeout_ms, tz_aware=True)
        try:
            client.admin.command('ping')
        except ConnectionFailure as e:
            client.close()
            raise ConfigurationError(f"Could not connect to MongoDB: {e}") from e

        store = cls(client, db_name)
        store.ensure_indexes()
        logger.info(f"Successfully connected to MongoDB database '{db_name}'")
        return store

    def ensure_indexes(self):
        self.articles.create_index([("url", ASCENDING)], unique=True)
        self.articles.create_index([("published_at", DESCENDING), ("scraped_at", DESCENDING)])
        self.articles.create_index([("source", ASCENDING)])
        self.bundles.create_index([("processed_at", DESCENDING)])
        self.bundles.create_index([("date", DESCENDING)])

    def ping(self):
        try:
            self.client.admin.command('ping')
            return True
        except PyMongoError as e:
            logger.error(f"MongoDB ping failed: {e}")
            return False

    def upsert_article(self, article: RawArticle) -> RawArticle:
        """Insert or update by url; scraped_at is refreshed on every write."""
        doc = article.to_document()
        doc["scraped_at"] = utcnow()
        stored = self.articles.find_one_and_update(
            {"url": article.url},
            {"$set": doc},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return RawArticle.from_document(stored)

    def save_articles(self, articles):
        """Upsert each article independently; a failing write is logged and skipped."""
        saved = []
        for article in articles:
            try:
                saved.append(self.upsert_article(article))
            except PyMongoError as e:
                logger.error(f"Failed to save article {article.url}: {e}")
        return saved

    def read_recent(self, hours=24, limit=50):
        """Articles scraped within the last `hours`, newest published first."""
        since = utcnow() - timedelta(hours=hours)
        cursor = self.articles.find({"scraped_at": {"$gt": since}}) \
            .sort([("published_at", DESCENDING), ("scraped_at", DESCENDING)]) \
            .limit(limit)
        return [RawArticle.from_document(doc) for doc in cursor]

    def append_bundle(self, bundle: DailyBundle) -> DailyBundle:
        result = self.bundles.insert_one(bundle.to_document())
        logger.info(f"Stored processed content with ID: {result.inserted_id}")
        return bundle.model_copy(update={"id": str(result.inserted_id)})

    def read_latest_bundle(self) -> Optional[DailyBundle]:
        doc = self.bundles.find_one({}, sort=[("processed_at", DESCENDING)])
        return DailyBundle.from_document(doc) if doc else None

    def mark_latest_published(self):
        """Set the published flag on the newest bundle. Returns False if there is none."""
        doc = self.bundles.find_one({}, sort=[("processed_at", DESCENDING)], projection={"_id": 1})
        if not doc:
            return False
        self.bundles.update_one({"_id": doc["_id"]}, {"$set": {"published": True}})
        return True

    def close(self):
        if self.client is not None:
            self.client.close()
            self.client = None
            logger.info("Database connection closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
