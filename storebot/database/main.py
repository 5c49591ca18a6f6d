from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool


class Database:
    BASE = declarative_base()

    def __init__(self, url: str):
        engine_kwargs = {}
        if url.startswith('sqlite'):
            engine_kwargs['connect_args'] = {'check_same_thread': False}
            if ':memory:' in url or url in ('sqlite://', 'sqlite:///'):
                engine_kwargs['poolclass'] = StaticPool
        self.url = url
        self.__engine = create_engine(url, **engine_kwargs)
        self.__session = scoped_session(sessionmaker(bind=self.__engine))

    @property
    def engine(self):
        return self.__engine

    @property
    def session(self):
        return self.__session

    def create_all(self) -> None:
        Database.BASE.metadata.create_all(self.__engine)

    def dispose(self) -> None:
        self.__session.remove()
        self.__engine.dispose()
