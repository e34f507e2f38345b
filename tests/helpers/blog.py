"""Small blog domain used to exercise cascade expansion."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeAlias

from cascadegraph.domain.persistence import MetadataRegistry, RelationType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from cascadegraph.domain.persistence import CascadeOption


Cascade: TypeAlias = "bool | Iterable[CascadeOption | str] | None"


@dataclass(eq=False, kw_only=True)
class Author:
    id: int | None = None
    name: str = ""
    posts: list[Post] = field(default_factory=list["Post"])
    profile: Profile | None = None


@dataclass(eq=False, kw_only=True)
class Profile:
    id: int | None = None
    bio: str = ""
    author: Author | None = None


@dataclass(eq=False, kw_only=True)
class Post:
    id: int | None = None
    title: str = ""
    author: Author | int | None = None
    tags: list[Tag] = field(default_factory=list["Tag"])
    pinned_tag: Tag | None = None
    comments: list[Comment] = field(default_factory=list["Comment"])


@dataclass(eq=False, kw_only=True)
class Tag:
    id: int | None = None
    name: str = ""
    posts: list[Post] = field(default_factory=list["Post"])


@dataclass(eq=False, kw_only=True)
class Comment:
    id: int | None = None
    body: str = ""
    post: Post | None = None


def blog_metadata(
    *,
    post_tags: Cascade = None,
    post_pinned_tag: Cascade = None,
    post_author: Cascade = None,
    post_comments: Cascade = None,
    tag_posts: Cascade = None,
    author_posts: Cascade = None,
    author_profile: Cascade = None,
    profile_author: Cascade = None,
    comment_post: Cascade = None,
) -> MetadataRegistry:
    """Declare the blog schema with the given cascade per relation."""

    registry = MetadataRegistry()
    for entity in (Author, Profile, Post, Tag, Comment):
        registry.register(entity)

    registry.relate(Post, "tags", Tag, relation_type=RelationType.MANY_TO_MANY, cascade=post_tags)
    registry.relate(
        Post, "pinned_tag", Tag, relation_type=RelationType.MANY_TO_ONE, cascade=post_pinned_tag
    )
    registry.relate(Post, "author", Author, cascade=post_author)
    registry.relate(
        Post, "comments", Comment, relation_type=RelationType.ONE_TO_MANY, cascade=post_comments
    )
    registry.relate(Tag, "posts", Post, relation_type=RelationType.MANY_TO_MANY, cascade=tag_posts)
    registry.relate(
        Author, "posts", Post, relation_type=RelationType.ONE_TO_MANY, cascade=author_posts
    )
    registry.relate(
        Author, "profile", Profile, relation_type=RelationType.ONE_TO_ONE, cascade=author_profile
    )
    registry.relate(
        Profile, "author", Author, relation_type=RelationType.ONE_TO_ONE, cascade=profile_author
    )
    registry.relate(Comment, "post", Post, cascade=comment_post)
    return registry
