"""ClubCheck billing entitlements backend."""
