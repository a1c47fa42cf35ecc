"""Initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column('created_at', sa.DateTime(timezone=True),
                  server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
    ]
    if updated:
        columns.append(
            sa.Column('updated_at', sa.DateTime(timezone=True),
                      server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False))
    return columns


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=True),
        sa.Column('organization_id', sa.String(length=64), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_organization_id', 'users', ['organization_id'])

    op.create_table(
        'interviews',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('organization_id', sa.String(length=64), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('objective', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('job_description', sa.Text(), nullable=True),
        sa.Column('questions', sa.JSON(), nullable=True),
        sa.Column('question_count', sa.Integer(), nullable=False),
        sa.Column('difficulty', sa.String(length=20), nullable=False),
        sa.Column('insights', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_interviews_id', 'interviews', ['id'])
    op.create_index('ix_interviews_organization_id', 'interviews', ['organization_id'])
    op.create_index('ix_interviews_user_id', 'interviews', ['user_id'])

    op.create_table(
        'candidates',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('organization_id', sa.String(length=64), nullable=False),
        sa.Column('interview_id', sa.Integer(), sa.ForeignKey('interviews.id'), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=64), nullable=True),
        sa.Column('resume_filename', sa.String(length=255), nullable=False),
        sa.Column('resume_file_url', sa.String(length=512), nullable=True),
        sa.Column('ats_score', sa.Integer(), nullable=False),
        sa.Column('ats_missing_skills', sa.JSON(), nullable=True),
        sa.Column('ats_feedback', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_candidates_id', 'candidates', ['id'])
    op.create_index('ix_candidates_organization_id', 'candidates', ['organization_id'])
    op.create_index('ix_candidates_interview_id', 'candidates', ['interview_id'])
    op.create_index('ix_candidates_email', 'candidates', ['email'])

    op.create_table(
        'responses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('interview_id', sa.Integer(), sa.ForeignKey('interviews.id'), nullable=False),
        sa.Column('call_id', sa.String(length=128), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('candidate_link_id', sa.Integer(), nullable=True),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('analytics', sa.JSON(), nullable=True),
        sa.Column('is_analysed', sa.Boolean(), nullable=False),
        sa.Column('is_ended', sa.Boolean(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=True),
        *_timestamps(updated=False),
    )
    op.create_index('ix_responses_id', 'responses', ['id'])
    op.create_index('ix_responses_interview_id', 'responses', ['interview_id'])
    op.create_index('ix_responses_call_id', 'responses', ['call_id'], unique=True)
    op.create_index('ix_responses_email', 'responses', ['email'])

    op.create_table(
        'candidate_interview_links',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('candidate_id', sa.Integer(), sa.ForeignKey('candidates.id'), nullable=False),
        sa.Column('interview_id', sa.Integer(), sa.ForeignKey('interviews.id'), nullable=False),
        sa.Column('organization_id', sa.String(length=64), nullable=False),
        sa.Column('unique_link_id', sa.String(length=32), nullable=False),
        sa.Column('link_url', sa.String(length=512), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('response_id', sa.Integer(),
                  sa.ForeignKey('responses.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_candidate_interview_links_id', 'candidate_interview_links', ['id'])
    op.create_index(
        'ix_candidate_interview_links_candidate_id', 'candidate_interview_links', ['candidate_id'])
    op.create_index(
        'ix_candidate_interview_links_interview_id', 'candidate_interview_links', ['interview_id'])
    op.create_index(
        'ix_candidate_interview_links_organization_id',
        'candidate_interview_links', ['organization_id'])
    op.create_index(
        'ix_candidate_interview_links_unique_link_id',
        'candidate_interview_links', ['unique_link_id'], unique=True)

    op.create_table(
        'resumes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('organization_id', sa.String(length=64), nullable=False),
        sa.Column('candidate_id', sa.Integer(), sa.ForeignKey('candidates.id'), nullable=False),
        sa.Column('interview_id', sa.Integer(), sa.ForeignKey('interviews.id'), nullable=False),
        sa.Column('filename', sa.String(length=255), nullable=False),
        sa.Column('file_url', sa.String(length=512), nullable=False),
        sa.Column('file_size', sa.Integer(), nullable=False),
        sa.Column('parsed_content', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=50), nullable=False),
        sa.Column('processing_notes', sa.Text(), nullable=True),
        sa.Column('uploaded_at', sa.DateTime(timezone=True),
                  server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
    )
    op.create_index('ix_resumes_id', 'resumes', ['id'])
    op.create_index('ix_resumes_organization_id', 'resumes', ['organization_id'])
    op.create_index('ix_resumes_candidate_id', 'resumes', ['candidate_id'])
    op.create_index('ix_resumes_interview_id', 'resumes', ['interview_id'])

    op.create_table(
        'resume_analyses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('resume_id', sa.Integer(), sa.ForeignKey('resumes.id'), nullable=False),
        sa.Column('interview_id', sa.Integer(), sa.ForeignKey('interviews.id'), nullable=False),
        sa.Column('ai_provider', sa.String(length=20), nullable=False),
        sa.Column('overall_score', sa.Integer(), nullable=False),
        sa.Column('skills_match', sa.Integer(), nullable=False),
        sa.Column('experience_match', sa.Integer(), nullable=False),
        sa.Column('education_match', sa.Integer(), nullable=False),
        sa.Column('technical_skills', sa.JSON(), nullable=True),
        sa.Column('soft_skills', sa.JSON(), nullable=True),
        sa.Column('experience_summary', sa.Text(), nullable=True),
        sa.Column('education_summary', sa.Text(), nullable=True),
        sa.Column('recommendations', sa.JSON(), nullable=True),
        *_timestamps(updated=False),
    )
    op.create_index('ix_resume_analyses_id', 'resume_analyses', ['id'])
    op.create_index('ix_resume_analyses_resume_id', 'resume_analyses', ['resume_id'])
    op.create_index('ix_resume_analyses_interview_id', 'resume_analyses', ['interview_id'])

    op.create_table(
        'ai_provider_preferences',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('organization_id', sa.String(length=64), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('preferred_provider', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_ai_provider_preferences_id', 'ai_provider_preferences', ['id'])
    op.create_index(
        'ix_ai_provider_preferences_organization_id',
        'ai_provider_preferences', ['organization_id'])
    op.create_index('ix_ai_provider_preferences_user_id', 'ai_provider_preferences', ['user_id'])


def downgrade() -> None:
    op.drop_table('ai_provider_preferences')
    op.drop_table('resume_analyses')
    op.drop_table('resumes')
    op.drop_table('candidate_interview_links')
    op.drop_table('responses')
    op.drop_table('candidates')
    op.drop_table('interviews')
    op.drop_table('users')
