"""SendRec waitlist service: signup API, admin listing and JSON snapshot store."""
