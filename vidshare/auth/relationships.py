"""
Subscriptions between accounts.

A subscription is stored on both documents: the follower lists the channel
in `subscribed_to`, the channel lists the follower in `subscribers`. Every
change writes both sides with set semantics, so repeating an operation is
harmless. If the second write fails, the first is rolled back to what it
was before and a PersistenceError is raised; calling the operation again
then completes it.
"""

from __future__ import annotations

import logging

from vidshare.errors import NotFound, PersistenceError, SelfSubscriptionError
from vidshare.storage.base import Collections, MetadataStorage

logger = logging.getLogger(__name__)

SUBSCRIBERS = "subscribers"
SUBSCRIBED_TO = "subscribed_to"


class RelationshipManager:
    """Keeps subscriber / subscribed-to edges symmetric."""

    def __init__(self, metadata: MetadataStorage):
        self.metadata = metadata

    async def _load(self, account_id: str) -> dict:
        doc = await self.metadata.get(Collections.ACCOUNTS, account_id)
        if doc is None:
            raise NotFound("There is no account with this id.")
        return doc

    async def subscribe(self, actor_id: str, target_id: str) -> None:
        """
        Make `actor_id` follow `target_id`.

        Raises:
            SelfSubscriptionError: actor and target are the same account
            NotFound: either account does not exist
            PersistenceError: the store failed part way (state rolled back)
        """
        if actor_id == target_id:
            raise SelfSubscriptionError("You cannot subscribe to yourself.")

        actor = await self._load(actor_id)
        await self._load(target_id)
        already_following = target_id in actor.get(SUBSCRIBED_TO, [])

        await self.metadata.add_to_set(Collections.ACCOUNTS, actor_id, SUBSCRIBED_TO, target_id)
        try:
            if not await self.metadata.add_to_set(Collections.ACCOUNTS, target_id, SUBSCRIBERS, actor_id):
                raise NotFound("There is no account with this id.")
        except (NotFound, PersistenceError):
            if not already_following:
                await self._rollback(
                    self.metadata.remove_from_set, actor_id, SUBSCRIBED_TO, target_id
                )
            raise

        logger.info(f"Account {actor_id} subscribed to {target_id}")

    async def unsubscribe(self, actor_id: str, target_id: str) -> None:
        """
        Stop `actor_id` following `target_id`. Unknown or absent edges are a no-op.

        Raises:
            SelfSubscriptionError: actor and target are the same account
            NotFound: the actor account does not exist
            PersistenceError: the store failed part way (state rolled back)
        """
        if actor_id == target_id:
            raise SelfSubscriptionError("You cannot unsubscribe from yourself.")

        actor = await self._load(actor_id)
        was_following = target_id in actor.get(SUBSCRIBED_TO, [])

        await self.metadata.remove_from_set(Collections.ACCOUNTS, actor_id, SUBSCRIBED_TO, target_id)
        try:
            # A vanished target has no side left to clean up
            await self.metadata.remove_from_set(Collections.ACCOUNTS, target_id, SUBSCRIBERS, actor_id)
        except PersistenceError:
            if was_following:
                await self._rollback(
                    self.metadata.add_to_set, actor_id, SUBSCRIBED_TO, target_id
                )
            raise

        logger.info(f"Account {actor_id} unsubscribed from {target_id}")

    async def detach(self, account_id: str) -> None:
        """Remove `account_id` from every edge it takes part in."""
        account = await self._load(account_id)

        for follower_id in account.get(SUBSCRIBERS, []):
            await self.metadata.remove_from_set(Collections.ACCOUNTS, follower_id, SUBSCRIBED_TO, account_id)
        for channel_id in account.get(SUBSCRIBED_TO, []):
            await self.metadata.remove_from_set(Collections.ACCOUNTS, channel_id, SUBSCRIBERS, account_id)

        await self.metadata.update(Collections.ACCOUNTS, account_id, {SUBSCRIBERS: [], SUBSCRIBED_TO: []})

    async def _rollback(self, op, account_id: str, field: str, value: str) -> None:
        try:
            await op(Collections.ACCOUNTS, account_id, field, value)
        except PersistenceError:
            logger.error(
                f"Could not roll back {field} on {account_id}; "
                f"edge with {value} is asymmetric until the operation is retried"
            )
        else:
            logger.warning(f"Rolled back {field} on {account_id} after a failed write")
