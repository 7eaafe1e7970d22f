from datetime import datetime

from fastapi.templating import Jinja2Templates

from blog import rendering
from blog.config import AUTHOR_NAME, PACKAGE_DIR, SITE_DESCRIPTION, SITE_NAME, SITE_URL

NAV_LINKS = [
    ("/", "Home"),
    ("/blog", "Blog"),
    ("/portfolio", "Portfolio"),
    ("/research", "Research"),
    ("/about", "About"),
]

templates = Jinja2Templates(directory=str(PACKAGE_DIR / "templates"))

env = templates.env
env.filters["korean_date"] = rendering.korean_date
env.filters["thousands"] = rendering.thousands
env.filters["iso_utc"] = rendering.iso_utc
env.globals.update(
    site_name=SITE_NAME,
    site_url=SITE_URL,
    site_description=SITE_DESCRIPTION,
    author_name=AUTHOR_NAME,
    nav_links=NAV_LINKS,
    current_year=lambda: datetime.now().year,
)
