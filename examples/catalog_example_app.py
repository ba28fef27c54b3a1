"""Example FastAPI catalog app formatting responses as JSON:API.

Run with:
    uvicorn examples.catalog_example_app:app --reload
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from sqlalchemy import Column, ForeignKey, Integer, String, Table, create_engine, select
from sqlalchemy.orm import Session, declarative_base, relationship
from sqlalchemy.pool import StaticPool

from catalog_jsonapi.config import get_settings, setup_logging
from catalog_jsonapi.middleware import ErrorHandlerMiddleware, JSONAPIResponseMiddleware
from catalog_jsonapi.serializers import JSONAPISerializer
from catalog_jsonapi.sqlalchemy import SQLAlchemyResolver

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
session = Session(engine)

Base = declarative_base()

collection_entities = Table(
    "collection_entities",
    Base.metadata,
    Column("collection_id", String, ForeignKey("collections.id"), primary_key=True),
    Column("video_id", String, ForeignKey("videos.id"), primary_key=True),
)


class Video(Base):
    __tablename__ = "videos"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    duration = Column(Integer, nullable=False)


class Collection(Base):
    __tablename__ = "collections"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    entities = relationship("Video", secondary=collection_entities, order_by=Video.id)


class VideoSerializer(JSONAPISerializer):
    class Meta:
        type_ = "video"
        model = Video
        fields = ["id", "title", "duration"]


class CollectionSerializer(JSONAPISerializer):
    class Meta:
        type_ = "collection"
        model = Collection
        fields = ["id", "title"]


resolver = SQLAlchemyResolver(
    session=session,
    serializers={"video": VideoSerializer, "collection": CollectionSerializer},
)


def seed_example_data(db: Session) -> None:
    """Insert example videos and collections if empty."""
    if db.execute(select(Video.id).limit(1)).first() is not None:
        return
    videos = [
        Video(id=f"1111-{index}", title=f"Episode {index + 1}", duration=1200 + index)
        for index in range(3)
    ]
    db.add_all(videos)
    db.add_all(
        [
            Collection(id=f"collection-{index}", title=f"Collection {index}", entities=videos)
            for index in range(14)
        ]
    )
    db.commit()


async def attach_identity(
    request: Request,
    x_channel_id: str | None = Header(default=None),
    x_platform_id: str | None = Header(default=None),
    x_platform_type: str | None = Header(default=None),
) -> None:
    """Stand-in for the identity service: read channel/platform from headers."""
    request.state.identity = {
        "channel": {"id": x_channel_id},
        "platform": {"id": x_platform_id, "platformType": x_platform_type},
    }


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    setup_logging(get_settings().log_level)
    Base.metadata.create_all(engine)
    seed_example_data(session)
    yield


app = FastAPI(
    title="Catalog JSON:API Example",
    description="Example catalog API formatting responses as JSON:API v1.1.",
    version="0.1.0",
    lifespan=lifespan,
    dependencies=[Depends(attach_identity)],
)
app.add_middleware(JSONAPIResponseMiddleware, resolver=resolver)
app.add_middleware(ErrorHandlerMiddleware)


@app.get("/collections")
async def list_collections(request: Request) -> list[dict]:
    page = request.query_params
    try:
        limit = max(int(page.get("page[limit]", 10)), 1)
        offset = max(int(page.get("page[offset]", 0)), 0)
    except ValueError:
        limit, offset = 10, 0
    ids = session.execute(
        select(Collection.id).order_by(Collection.id).offset(offset).limit(limit + 1)
    ).scalars().all()
    hints = {}
    if len(ids) > limit:
        hints["next"] = {"page[limit]": limit, "page[offset]": offset + limit}
    if offset > 0:
        hints["prev"] = {"page[limit]": limit, "page[offset]": max(offset - limit, 0)}
    request.state.links_queries = hints
    return [await resolver.resolve("collection", resource_id) for resource_id in ids[:limit]]


@app.get("/collections/{resource_id}")
async def retrieve_collection(resource_id: str) -> dict:
    resource = await resolver.resolve("collection", resource_id)
    if resource is None:
        raise HTTPException(status_code=404, detail="Collection not found.")
    return resource
