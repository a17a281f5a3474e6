"""Notification messages (share invitations, milestone alerts); delivery is pluggable."""
