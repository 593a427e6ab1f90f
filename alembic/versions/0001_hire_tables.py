"""Add hh sync, issue and token tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'hh_tokens',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('access_token', sa.String(length=255), nullable=False),
        sa.Column('refresh_token', sa.String(length=255), nullable=False),
        sa.Column('expires_in', sa.Integer(), nullable=False),
        sa.Column('obtained_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    # Local mirrors of hh.ru entities, keyed by their remote id
    for table, payload, stamp in (
        ('hh_vacancies', sa.Column('info', sa.JSON(), nullable=True), 'info_updated_at'),
        ('hh_applicants', sa.Column('resume', sa.JSON(), nullable=True), 'resume_updated_at'),
    ):
        op.create_table(
            table,
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('hh_id', sa.String(length=64), nullable=False),
            payload,
            sa.Column(stamp, sa.DateTime(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(f'ix_{table}_hh_id', table, ['hh_id'], unique=True)

    op.create_table(
        'hh_responses',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('hh_id', sa.String(length=64), nullable=False),
        sa.Column('refusal_url', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_hh_responses_hh_id', 'hh_responses', ['hh_id'], unique=True)

    op.create_table(
        'issues',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('project', sa.String(length=255), nullable=False),
        sa.Column('subject', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=50), nullable=False),
        sa.Column('author_id', sa.Integer(), nullable=False),
        sa.Column('assigned_to_id', sa.Integer(), nullable=True),
        sa.Column('vacancy_id', sa.String(length=64), nullable=True),
        sa.Column('resume_id', sa.String(length=64), nullable=True),
        sa.Column('hh_response_id', sa.String(length=64), nullable=False),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('lock_version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_issues_project', 'issues', ['project'], unique=False)
    op.create_index('ix_issues_resume_id', 'issues', ['resume_id'], unique=False)
    op.create_index('ix_issues_hh_response_id', 'issues', ['hh_response_id'], unique=False)

    op.create_table(
        'journals',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('issue_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['issue_id'], ['issues.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_journals_issue_id', 'journals', ['issue_id'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_journals_issue_id', table_name='journals')
    op.drop_table('journals')
    op.drop_index('ix_issues_hh_response_id', table_name='issues')
    op.drop_index('ix_issues_resume_id', table_name='issues')
    op.drop_index('ix_issues_project', table_name='issues')
    op.drop_table('issues')
    op.drop_index('ix_hh_responses_hh_id', table_name='hh_responses')
    op.drop_table('hh_responses')
    for table in ('hh_applicants', 'hh_vacancies'):
        op.drop_index(f'ix_{table}_hh_id', table_name=table)
        op.drop_table(table)
    op.drop_table('hh_tokens')
