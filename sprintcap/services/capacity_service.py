"""
Team capacity business logic.

Loads a team's members and their schedule entries for the sprint containing
a date, then runs the capacity and health calculations over them.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sprintcap.engine.capacity import ScheduleEntry, TeamMemberSchedule, calculate_team_summary
from sprintcap.engine.detection import SprintDetectionConfig, SprintInfo, detect_sprint_for_date
from sprintcap.engine.health import calculate_sprint_metrics, get_sprint_health_status
from sprintcap.models.schedule_entry import ScheduleEntryRow
from sprintcap.models.team import Team, TeamMember
from sprintcap.schemas.capacity import TeamCapacityResponse


class CapacityService:
    """Handles team capacity queries."""

    def __init__(self, db: AsyncSession, config: SprintDetectionConfig) -> None:
        self.db = db
        self.config = config

    # -----------------------------------------------------------------------
    # Team capacity
    # -----------------------------------------------------------------------

    async def team_capacity(self, team_id: int, target_date: date) -> TeamCapacityResponse:
        """Capacity, completion and health of a team for the sprint containing ``target_date``."""
        team = await self._get_team(team_id)
        sprint = detect_sprint_for_date(target_date, self.config)
        return await self.team_capacity_for_sprint(team, sprint)

    async def team_capacity_for_sprint(self, team: Team, sprint: SprintInfo) -> TeamCapacityResponse:
        work_week = self.config.work_week

        members_result = await self.db.execute(
            select(TeamMember)
            .where(TeamMember.team_id == team.id)
            .order_by(TeamMember.name)
        )
        members = list(members_result.scalars().all())

        entries_by_member = await self._get_entries(
            [member.id for member in members], sprint.start_date, sprint.end_date
        )

        schedules = [
            TeamMemberSchedule(
                member_id=member.id,
                name=member.name,
                is_manager=member.is_manager,
                entries=entries_by_member.get(member.id, []),
            )
            for member in members
        ]

        summary = calculate_team_summary(
            schedules,
            sprint.start_date,
            sprint.end_date,
            work_week,
            sprint_number=sprint.sprint_number,
            team_id=team.id,
            team_name=team.name,
        )
        metrics = calculate_sprint_metrics(
            len(members),
            sprint.start_date,
            sprint.end_date,
            [entry for entries in entries_by_member.values() for entry in entries],
            work_week,
        )
        health = get_sprint_health_status(
            metrics.completion_percentage,
            summary.utilization_percentage,
            sprint.days_remaining,
        )

        return TeamCapacityResponse(sprint=sprint, metrics=metrics, summary=summary, health=health)

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------

    async def _get_team(self, team_id: int) -> Team:
        result = await self.db.execute(select(Team).where(Team.id == team_id))
        team = result.scalar_one_or_none()
        if team is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"code": "TEAM_NOT_FOUND", "message": "Team not found"},
            )
        return team

    async def _get_entries(
        self, member_ids: list[int], start_date: date, end_date: date
    ) -> dict[int, list[ScheduleEntry]]:
        """Schedule entries in ``[start_date, end_date]`` grouped by member."""
        if not member_ids:
            return {}

        result = await self.db.execute(
            select(ScheduleEntryRow).where(
                ScheduleEntryRow.member_id.in_(member_ids),
                ScheduleEntryRow.entry_date >= start_date,
                ScheduleEntryRow.entry_date <= end_date,
            )
        )

        grouped: dict[int, list[ScheduleEntry]] = defaultdict(list)
        for row in result.scalars().all():
            grouped[row.member_id].append(ScheduleEntry.from_row(row))
        return dict(grouped)
