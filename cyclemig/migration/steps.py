# cyclemig/migration/steps.py
"""
The five migration phases.

Each phase reads its source rows, translates foreign keys through the ID maps
on the context and writes the result to the destination, one row at a time.
Rows whose parent was never migrated are skipped with a warning; any database
error propagates to the caller, which rolls the whole run back.

Order matters: users -> cycles -> recycled_from fixup -> likes -> comments.
"""

from __future__ import annotations

import logging

from cyclemig.migration.context import MigrationContext

logger = logging.getLogger(__name__)


def migrate_users(ctx: MigrationContext) -> None:
    """Copy every user; each one gets a new id recorded in ctx.user_ids."""
    phase = ctx.stats.users

    for user in ctx.source.fetch_users():
        phase.read += 1
        new_id = ctx.destination.insert_user(user)
        ctx.user_ids[user.id] = new_id
        phase.written += 1
        logger.debug(f"User {user.id} -> {new_id}")

    logger.info(f"User migration complete: {len(ctx.user_ids)} users mapped")


def migrate_cycles(ctx: MigrationContext) -> None:
    """
    Copy cycles whose owner was migrated.

    recycled_from is resolved only if the referenced cycle is already in the
    map; otherwise it is written as NULL and fixed by fix_recycled_from().
    """
    phase = ctx.stats.cycles

    for cycle in ctx.source.fetch_cycles():
        phase.read += 1
        new_user_id = ctx.user_ids.get(cycle.user_id)
        if new_user_id is None:
            message = f"No user mapping for user_id={cycle.user_id} (cycle_id={cycle.id})"
            logger.warning(message)
            phase.skip(message)
            continue

        recycled_from_id = None
        if cycle.recycled_from is not None:
            recycled_from_id = ctx.cycle_ids.get(cycle.recycled_from)

        new_id = ctx.destination.insert_cycle(cycle, new_user_id, recycled_from_id)
        ctx.cycle_ids[cycle.id] = new_id
        phase.written += 1
        logger.debug(f"Cycle {cycle.id} -> {new_id} (recycledFromId={recycled_from_id})")

    logger.info(f"Cycle migration complete: {len(ctx.cycle_ids)} cycles mapped")


def fix_recycled_from(ctx: MigrationContext) -> None:
    """Second pass over self-references, once every cycle has a new id."""
    phase = ctx.stats.recycled_links

    for link in ctx.source.fetch_recycled_links():
        phase.read += 1
        new_cycle_id = ctx.cycle_ids.get(link.cycle_id)
        new_recycled_from_id = ctx.cycle_ids.get(link.recycled_from)
        if new_cycle_id is None or new_recycled_from_id is None:
            message = (
                f"No cycle mapping for cycle_id={link.cycle_id}, "
                f"recycled_from_id={link.recycled_from}"
            )
            logger.warning(message)
            phase.skip(message)
            continue

        ctx.destination.update_recycled_from(new_cycle_id, new_recycled_from_id)
        phase.written += 1

    logger.info(f"recycledFromId update complete: {phase.written} links set")


def migrate_likes(ctx: MigrationContext) -> None:
    phase = ctx.stats.likes

    for like in ctx.source.fetch_likes():
        phase.read += 1
        new_user_id = ctx.user_ids.get(like.user_id)
        new_cycle_id = ctx.cycle_ids.get(like.cycle_id)
        if new_user_id is None or new_cycle_id is None:
            message = f"No like mapping for user_id={like.user_id}, cycle_id={like.cycle_id}"
            logger.warning(message)
            phase.skip(message)
            continue

        ctx.destination.insert_like(new_user_id, new_cycle_id, like.created_at)
        phase.written += 1

    logger.info(f"Like migration complete: {phase.written} of {phase.read} likes written")


def migrate_comments(ctx: MigrationContext) -> None:
    phase = ctx.stats.comments

    for comment in ctx.source.fetch_comments():
        phase.read += 1
        new_user_id = ctx.user_ids.get(comment.user_id)
        new_cycle_id = ctx.cycle_ids.get(comment.cycle_id)
        if new_user_id is None or new_cycle_id is None:
            message = f"No comment mapping for user_id={comment.user_id}, cycle_id={comment.cycle_id}"
            logger.warning(message)
            phase.skip(message)
            continue

        ctx.destination.insert_comment(comment.content, new_user_id, new_cycle_id, comment.created_at)
        phase.written += 1

    logger.info(f"Comment migration complete: {phase.written} of {phase.read} comments written")
