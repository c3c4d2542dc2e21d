"""Supabase repository for user profiles."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from meal_planner.domain.nutrition import MacroSplit, UserProfile
from meal_planner.services.profiles import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Reads calorie targets and subscription status from the users table."""

    client: Client

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the stored profile for a user, if present."""
        response = (
            self.client.table("users")
            .select("id, caloric_target, macro_split, subscription_status")
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        target = row.get("caloric_target")
        split = row.get("macro_split")
        return UserProfile(
            user_id=UUID(str(row["id"])),
            caloric_target=float(target) if target else None,
            macro_split=(
                MacroSplit(
                    protein_pct=float(split.get("protein_pct", 30)),
                    carbs_pct=float(split.get("carbs_pct", 40)),
                    fat_pct=float(split.get("fat_pct", 30)),
                )
                if isinstance(split, dict)
                else None
            ),
            subscription_status=row.get("subscription_status"),
        )
