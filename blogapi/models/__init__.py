"""ORM models. Importing `blogapi.models.blog` registers the `blogs` table."""
