"""
Post routes.

Read is an unconditional grant for every role; update and delete are
ownership-capable, so EDITORs may change only their own posts.
"""

from fastapi import APIRouter, Depends, status

from postguard.api.dependencies.auth import AppContainer, AuthContext, require_permission
from postguard.models.post import Post
from postguard.schemas.post import PostCreate, PostResponse, PostUpdate

router = APIRouter()


def to_response(post: Post) -> PostResponse:
    return PostResponse.model_validate(post)


@router.get("", response_model=list[PostResponse])
async def list_posts(
    container: AppContainer,
    _: AuthContext = Depends(require_permission("posts", "read")),
):
    """List all posts."""
    return [to_response(p) for p in await container.posts.list()]


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    data: PostCreate,
    container: AppContainer,
    ctx: AuthContext = Depends(require_permission("posts", "create")),
):
    """Create a post authored by the caller."""
    post = await container.posts.create(
        title=data.title,
        content=data.content,
        author_id=ctx.identity.id,
        author=ctx.identity.display_name,
    )
    return to_response(post)


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: int,
    data: PostUpdate,
    container: AppContainer,
    ctx: AuthContext = Depends(require_permission("posts", "update", ownership_capable=True)),
):
    """Update a post. 404 if missing, 403 if the caller may only edit own posts."""
    post = await container.posts.fetch("posts", post_id)
    container.authorization.enforce_ownership(ctx.decision, post, ctx.identity, "posts", "update")

    updated = await container.posts.update(post_id, title=data.title, content=data.content)
    return to_response(updated)


@router.delete("/{post_id}")
async def delete_post(
    post_id: int,
    container: AppContainer,
    ctx: AuthContext = Depends(require_permission("posts", "delete", ownership_capable=True)),
):
    """Delete a post. 404 if missing, 403 if the caller may only delete own posts."""
    post = await container.posts.fetch("posts", post_id)
    container.authorization.enforce_ownership(ctx.decision, post, ctx.identity, "posts", "delete")

    await container.posts.delete(post_id)
    return {"message": "Post deleted successfully."}
