# app/services/profile_service.py
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status, UploadFile
from typing import List, Optional
import logging

from app.models.profile import Profile, ProfileStatusEnum
from app.repositories.profile_repo import ProfileRepository
from app.schemas.identity_schema import IdentityUser
from app.schemas.profile_schema import ProfileUpdate
from app.services.realtime_service import publish_profile_change
from app.services.storage_service import StorageService
from app.utils.profile_filter import filter_profiles

logger = logging.getLogger(__name__)

def new_profile_from_identity(identity: IdentityUser) -> Profile:
    """First sign-in: seed a profile from the identity plus defaults"""
    return Profile(
        clerk_id=identity.id,
        email=identity.email or "",
        full_name=identity.full_name or "",
        avatar_url=identity.image_url or "",
        availability="weekends",
        is_public=True,
        bio="",
        rating=0,
        total_swaps=0,
        status=ProfileStatusEnum.active,
    )


def synced_values(profile: Profile, identity: IdentityUser) -> dict:
    """Identity values, keeping the stored value where the identity is blank"""
    return {
        "email": identity.email or profile.email,
        "full_name": identity.full_name or profile.full_name,
        "avatar_url": identity.image_url or profile.avatar_url,
    }


class ProfileService:
    def __init__(self, db: AsyncSession, storage: Optional[StorageService] = None):
        self.repo = ProfileRepository(db)
        self.db = db
        self.storage = storage or StorageService()

    async def sync_profile(self, identity: IdentityUser) -> Profile | None:
        """
        Create the caller's profile on first sign-in, otherwise refresh the
        identity-provider fields. Database errors are logged and reported as
        "no profile" (None); the client retries on its next session load.
        """
        try:
            profile = await self.repo.get_by_clerk_id(identity.id)

            if profile is None:
                profile = await self.repo.create_profile(new_profile_from_identity(identity))
                logger.info(f"Created profile {profile.id} for {identity.id}")
                await publish_profile_change("INSERT", new=profile)
                return profile

            changed = False
            for field, value in synced_values(profile, identity).items():
                if getattr(profile, field) != value:
                    setattr(profile, field, value)
                    changed = True

            if not changed:
                return profile

            profile = await self.repo.save_profile(profile)
            logger.info(f"Refreshed profile {profile.id} from identity provider")
            await publish_profile_change("UPDATE", new=profile)
            return profile

        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error syncing profile for {identity.id}: {e}", exc_info=True)
            return None

    async def get_my_profile(self, identity: IdentityUser) -> Profile | None:
        return await self.repo.get_by_clerk_id(identity.id)

    async def update_my_profile(self, profile: Profile, update_data: ProfileUpdate) -> Profile:
        updated = await self.repo.update_profile(profile, update_data)
        await publish_profile_change("UPDATE", new=updated)
        return updated

    async def get_profile(self, profile_id: str, viewer: Optional[Profile] = None) -> Profile:
        """One profile; private or non-active ones are visible to their owner only"""
        profile = await self.repo.get_by_id(profile_id)
        if not profile:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Profile not found")

        is_owner = viewer is not None and viewer.id == profile.id
        if not is_owner and (not profile.is_public or profile.status != ProfileStatusEnum.active):
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Profile not found")

        return profile

    async def browse_profiles(
        self,
        viewer: Optional[Profile],
        query: str = "",
        category: Optional[str] = None,
        skill_id: Optional[str] = None,
    ) -> List[Profile]:
        """
        Fetch every public, active profile, then filter in memory
        """
        profiles = await self.repo.list_public_active_profiles()
        return filter_profiles(
            profiles,
            query=query,
            category=category,
            skill_id=skill_id,
            exclude_profile_id=viewer.id if viewer else None,
        )

    async def upload_photo(self, profile: Profile, file: UploadFile) -> Profile:
        previous_url = profile.avatar_url
        profile.avatar_url = await self.storage.upload_profile_photo(profile.id, file)
        updated = await self.repo.save_profile(profile)

        # Only delete objects we own; identity-provider avatars stay untouched
        if self.storage.is_stored_url(previous_url):
            self.storage.delete_profile_photo(previous_url)

        await publish_profile_change("UPDATE", new=updated)
        return updated

    async def remove_photo(self, profile: Profile) -> Profile:
        if not self.storage.is_stored_url(profile.avatar_url):
            raise HTTPException(status.HTTP_404_NOT_FOUND, "No uploaded photo to delete")

        self.storage.delete_profile_photo(profile.avatar_url)
        profile.avatar_url = ""
        updated = await self.repo.save_profile(profile)
        await publish_profile_change("UPDATE", new=updated)
        return updated
