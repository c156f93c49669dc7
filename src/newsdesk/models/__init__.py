from newsdesk.db.base import Base  # noqa

from .news_models import News, NewsArchive, NewsSource  # noqa
