"""Initial schema and seed data for sws-blog

Revision ID: 20260301_000000
Revises: None
Create Date: 2026-03-01 00:00:00.000000

This is the initial migration that creates all tables for the sws-blog
service and seeds the default author and categories. This includes:
- Blog tables (authors, categories, tags, posts, post tags, FAQs, related posts)
- Live chat tables (conversations, messages)
- Submission tables (surveys, enquiries, contact submissions, newsletter subscribers, booking requests)

Revision format: YYYYMMDD_HHMMSS_description

"""

from datetime import datetime, timezone
from typing import Sequence, Union
from uuid import uuid4

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260301_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables and seed initial data."""

    # Create blog_authors table
    op.create_table(
        "blog_authors",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("slug", sa.String(200), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("social_links", sa.JSON(), nullable=False),
        sa.Column("expertise", sa.JSON(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_blog_authors_slug", "slug", unique=True),
    )

    # Create blog_categories table
    op.create_table(
        "blog_categories",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("slug", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("subtitle", sa.Text(), nullable=True),
        sa.Column("meta_title", sa.Text(), nullable=True),
        sa.Column("meta_description", sa.Text(), nullable=True),
        sa.Column("color", sa.String(32), nullable=True),
        sa.Column("icon", sa.String(64), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("show_in_nav", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("show_on_homepage", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("parent_id", sa.String(64), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["parent_id"], ["blog_categories.id"]),
        sa.Index("ix_blog_categories_slug", "slug", unique=True),
    )

    # Create blog_tags table
    op.create_table(
        "blog_tags",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("slug", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_blog_tags_slug", "slug", unique=True),
    )

    # Create blog_posts table
    op.create_table(
        "blog_posts",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("slug", sa.String(500), nullable=False),
        sa.Column("subtitle", sa.Text(), nullable=True),
        sa.Column("excerpt", sa.Text(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("featured_image", sa.Text(), nullable=True),
        sa.Column("featured_image_alt", sa.Text(), nullable=True),
        sa.Column("og_image", sa.Text(), nullable=True),
        sa.Column("author_id", sa.String(64), nullable=False),
        sa.Column("category_id", sa.String(64), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="draft"),
        sa.Column("published_at", sa.DateTime(), nullable=True),
        sa.Column("scheduled_for", sa.DateTime(), nullable=True),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("featured_order", sa.Integer(), nullable=True),
        sa.Column("meta_title", sa.Text(), nullable=True),
        sa.Column("meta_description", sa.Text(), nullable=True),
        sa.Column("canonical_url", sa.Text(), nullable=True),
        sa.Column("primary_keyword", sa.Text(), nullable=True),
        sa.Column("secondary_keywords", sa.JSON(), nullable=False),
        sa.Column("ai_summary", sa.Text(), nullable=True),
        sa.Column("key_takeaways", sa.JSON(), nullable=False),
        sa.Column("definitive_statements", sa.JSON(), nullable=False),
        sa.Column("questions_answered", sa.JSON(), nullable=False),
        sa.Column("entities", sa.JSON(), nullable=False),
        sa.Column("topic_cluster", sa.Text(), nullable=True),
        sa.Column("content_type", sa.Text(), nullable=True),
        sa.Column("expertise_level", sa.Text(), nullable=True),
        sa.Column("last_verified_at", sa.DateTime(), nullable=True),
        sa.Column("sources", sa.JSON(), nullable=False),
        sa.Column("read_time_minutes", sa.Integer(), nullable=True),
        sa.Column("word_count", sa.Integer(), nullable=True),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["author_id"], ["blog_authors.id"]),
        sa.ForeignKeyConstraint(["category_id"], ["blog_categories.id"]),
        sa.Index("ix_blog_posts_slug", "slug", unique=True),
        sa.Index("ix_blog_posts_author_id", "author_id"),
        sa.Index("ix_blog_posts_category_id", "category_id"),
        sa.Index("ix_blog_posts_status", "status"),
        sa.Index("ix_blog_posts_published_at", "published_at"),
    )

    # Create blog_post_tags table
    op.create_table(
        "blog_post_tags",
        sa.Column("post_id", sa.String(64), nullable=False),
        sa.Column("tag_id", sa.String(64), nullable=False),
        sa.PrimaryKeyConstraint("post_id", "tag_id"),
        sa.ForeignKeyConstraint(["post_id"], ["blog_posts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tag_id"], ["blog_tags.id"], ondelete="CASCADE"),
        sa.Index("ix_blog_post_tags_tag_id", "tag_id"),
    )

    # Create blog_faqs table
    op.create_table(
        "blog_faqs",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("post_id", sa.String(64), nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("answer", sa.Text(), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["post_id"], ["blog_posts.id"], ondelete="CASCADE"),
        sa.Index("ix_blog_faqs_post_id", "post_id"),
    )

    # Create blog_related_posts table
    op.create_table(
        "blog_related_posts",
        sa.Column("post_id", sa.String(64), nullable=False),
        sa.Column("related_post_id", sa.String(64), nullable=False),
        sa.Column("relevance_score", sa.Float(), nullable=False, server_default="1.0"),
        sa.Column("is_manual", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("post_id", "related_post_id"),
        sa.ForeignKeyConstraint(["post_id"], ["blog_posts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["related_post_id"], ["blog_posts.id"], ondelete="CASCADE"),
    )

    # Create chat_conversations table
    op.create_table(
        "chat_conversations",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("visitor_id", sa.String(128), nullable=False),
        sa.Column("post_id", sa.String(64), nullable=True),
        sa.Column("source_url", sa.Text(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="open"),
        sa.Column("consent_given_at", sa.DateTime(), nullable=False),
        sa.Column("last_message_at", sa.DateTime(), nullable=True),
        sa.Column("closed_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["post_id"], ["blog_posts.id"], ondelete="SET NULL"),
        sa.Index("ix_chat_conversations_visitor_id", "visitor_id"),
        sa.Index("ix_chat_conversations_status", "status"),
        sa.Index("ix_chat_conversations_created_at", "created_at"),
    )

    # Create chat_messages table
    op.create_table(
        "chat_messages",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("conversation_id", sa.String(64), nullable=False),
        sa.Column("sender", sa.String(16), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("read_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["conversation_id"], ["chat_conversations.id"], ondelete="CASCADE"),
        sa.Index("ix_chat_messages_conversation_id", "conversation_id"),
        sa.Index("ix_chat_messages_created_at", "created_at"),
    )

    # Create surveys table
    op.create_table(
        "surveys",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    # Create enquiries table
    op.create_table(
        "enquiries",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("survey_id", sa.String(64), nullable=True),
        sa.Column("post_id", sa.String(64), nullable=True),
        sa.Column("respondent_name", sa.Text(), nullable=True),
        sa.Column("respondent_email", sa.Text(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="new"),
        sa.Column("response_data", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["survey_id"], ["surveys.id"]),
        sa.ForeignKeyConstraint(["post_id"], ["blog_posts.id"], ondelete="SET NULL"),
        sa.Index("ix_enquiries_survey_id", "survey_id"),
        sa.Index("ix_enquiries_post_id", "post_id"),
        sa.Index("ix_enquiries_status", "status"),
        sa.Index("ix_enquiries_created_at", "created_at"),
    )

    # Create contact_submissions table
    op.create_table(
        "contact_submissions",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("company", sa.Text(), nullable=True),
        sa.Column("phone", sa.String(64), nullable=True),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="new"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_contact_submissions_created_at", "created_at"),
    )

    # Create newsletter_subscribers table
    op.create_table(
        "newsletter_subscribers",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="active"),
        sa.Column("source", sa.Text(), nullable=True),
        sa.Column("subscribed_at", sa.DateTime(), nullable=False),
        sa.Column("unsubscribed_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_newsletter_subscribers_email", "email", unique=True),
    )

    # Create booking_requests table
    op.create_table(
        "booking_requests",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("post_id", sa.String(64), nullable=True),
        sa.Column("event_type_uri", sa.Text(), nullable=False),
        sa.Column("start_time", sa.DateTime(), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("phone", sa.String(64), nullable=True),
        sa.Column("company", sa.Text(), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("timezone", sa.String(64), nullable=True),
        sa.Column("scheduling_url", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["post_id"], ["blog_posts.id"], ondelete="SET NULL"),
    )

    # Seed the default author and categories
    now = datetime.now(timezone.utc).replace(tzinfo=None)

    authors = sa.table(
        "blog_authors",
        sa.column("id", sa.String),
        sa.column("name", sa.String),
        sa.column("slug", sa.String),
        sa.column("bio", sa.Text),
        sa.column("social_links", sa.JSON),
        sa.column("expertise", sa.JSON),
        sa.column("is_active", sa.Boolean),
        sa.column("created_at", sa.DateTime),
        sa.column("updated_at", sa.DateTime),
    )
    op.bulk_insert(
        authors,
        [
            {
                "id": str(uuid4()),
                "name": "Marc",
                "slug": "marc",
                "bio": "Founder of Solve with Software. Builds web and mobile products for growing businesses.",
                "social_links": {},
                "expertise": ["software development", "web applications", "mobile apps"],
                "is_active": True,
                "created_at": now,
                "updated_at": now,
            }
        ],
    )

    categories = sa.table(
        "blog_categories",
        sa.column("id", sa.String),
        sa.column("name", sa.String),
        sa.column("slug", sa.String),
        sa.column("description", sa.Text),
        sa.column("display_order", sa.Integer),
        sa.column("show_in_nav", sa.Boolean),
        sa.column("show_on_homepage", sa.Boolean),
        sa.column("created_at", sa.DateTime),
        sa.column("updated_at", sa.DateTime),
    )
    default_categories = [
        ("Software Development", "software-development", "Building custom software that fits the business."),
        ("Web Applications", "web-applications", "Modern web apps, from first prototype to production."),
        ("Mobile Apps", "mobile-apps", "Native and cross-platform mobile development."),
        ("Business Automation", "business-automation", "Replacing manual work with dependable software."),
    ]
    op.bulk_insert(
        categories,
        [
            {
                "id": str(uuid4()),
                "name": name,
                "slug": slug,
                "description": description,
                "display_order": order,
                "show_in_nav": True,
                "show_on_homepage": True,
                "created_at": now,
                "updated_at": now,
            }
            for order, (name, slug, description) in enumerate(default_categories)
        ],
    )


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    op.drop_table("booking_requests")
    op.drop_table("newsletter_subscribers")
    op.drop_table("contact_submissions")
    op.drop_table("enquiries")
    op.drop_table("surveys")
    op.drop_table("chat_messages")
    op.drop_table("chat_conversations")
    op.drop_table("blog_related_posts")
    op.drop_table("blog_faqs")
    op.drop_table("blog_post_tags")
    op.drop_table("blog_posts")
    op.drop_table("blog_tags")
    op.drop_table("blog_categories")
    op.drop_table("blog_authors")
