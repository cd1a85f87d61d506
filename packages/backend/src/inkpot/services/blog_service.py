"""Blog service: ownership-scoped CRUD.

Every operation takes the requester's id and filters on
Blog.author_id == requester. Update and delete are single statements
whose WHERE clause carries both the blog id and the author, so "no such
blog" and "someone else's blog" both come back as zero rows and are
reported as the same NotFoundOrForbidden.
"""

import uuid

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from inkpot.db.models import Blog, utcnow
from inkpot.errors import NotFoundOrForbidden

logger = structlog.get_logger()


class BlogService:
    """Business logic for blog entries."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self, author_id: uuid.UUID, title: str, description: str
    ) -> Blog:
        blog = Blog(title=title, description=description, author_id=author_id)
        self.db.add(blog)
        await self.db.commit()
        logger.info("blog.created", blog_id=str(blog.id), author_id=str(author_id))
        return blog

    async def list_owned(self, author_id: uuid.UUID) -> list[Blog]:
        result = await self.db.execute(
            select(Blog)
            .where(Blog.author_id == author_id)
            .order_by(Blog.created_at.desc())
        )
        return list(result.scalars().all())

    async def update_owned(
        self,
        author_id: uuid.UUID,
        blog_id: uuid.UUID,
        title: str,
        description: str,
    ) -> Blog:
        result = await self.db.execute(
            update(Blog)
            .where(Blog.id == blog_id, Blog.author_id == author_id)
            .values(title=title, description=description, updated_at=utcnow())
            .returning(Blog)
        )
        blog = result.scalars().first()
        if blog is None:
            await self.db.rollback()
            raise NotFoundOrForbidden("Blog not found or not authorized to update.")
        await self.db.commit()
        logger.info("blog.updated", blog_id=str(blog_id))
        return blog

    async def delete_owned(self, author_id: uuid.UUID, blog_id: uuid.UUID) -> None:
        result = await self.db.execute(
            delete(Blog)
            .where(Blog.id == blog_id, Blog.author_id == author_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise NotFoundOrForbidden("Blog not found or not authorized to delete.")
        await self.db.commit()
        logger.info("blog.deleted", blog_id=str(blog_id))
