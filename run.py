from apscheduler.schedulers.background import BackgroundScheduler
import atexit
import logging

from buenos_dias import create_app
from buenos_dias.tasks.pipeline import build_pipeline
from config import get_config

config = get_config()
config.validate()

app = create_app(config)
store = app.extensions['article_store']
logger = logging.getLogger(__name__)


def scheduled_scrape():
    pipeline = build_pipeline(app.config, store)
    pipeline.scrape(sources=app.config['SCRAPE_SOURCES'], limit=app.config['SCRAPE_LIMIT'])


def scheduled_curation():
    pipeline = build_pipeline(app.config, store)
    report = pipeline.curate()
    logger.info(f"Daily curation finished: {report.summary_line()}")


# Scheduler setup
scheduler = BackgroundScheduler()
scheduler.add_job(scheduled_scrape, 'interval', hours=config.SCRAPE_INTERVAL_HOURS, id='scrape')
scheduler.add_job(scheduled_curation, 'cron', hour=config.CURATION_HOUR, id='daily_curation')
scheduler.start()
atexit.register(lambda: scheduler.shutdown())

if __name__ == '__main__':
    app.run(host='0.0.0.0', port=5000)
