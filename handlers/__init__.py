"""
handlers/ - Telegram commands
=============================
One module per area (donor account, donations, recurring reminders,
campaigns, admin exports and reports). Handlers parse command arguments,
call a service, and turn DonorBotError into a reply. Donor commands are
wrapped by registered_only/rate_limited, admin ones by admin_only.
"""
