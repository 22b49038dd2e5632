"""
Database Schemas for the Portfolio app

The whole site is stored as ONE aggregate document (PortfolioContent) in the
"portfolio_config" collection, keyed by a fixed id. The other sections below
are the pieces of that document; they are never stored on their own.

Collections:
- portfolio_config: {"_id": "main", "content": PortfolioContent}
- user: admin identity
- session: admin login sessions
"""
from pydantic import BaseModel, Field, EmailStr
from typing import Optional, List
from datetime import datetime


class Contact(BaseModel):
    email: str = ""
    instagram: str = ""
    linkedin: Optional[str] = None


class Profile(BaseModel):
    name: str = ""
    role: str = ""
    bio: List[str] = Field(default_factory=list, description="Biography paragraphs, in order")
    contact: Contact = Field(default_factory=Contact)
    profile_image: str = ""


class Photo(BaseModel):
    id: str
    src: str = Field("", description="Image URL, may carry a pos=X,Y focal point")
    alt: str = ""
    caption: Optional[str] = ""
    width: Optional[int] = None
    height: Optional[int] = None
    pdf_url: Optional[str] = Field(None, description="Optional attached document")


class Album(BaseModel):
    id: str
    title: str = ""
    description: str = ""
    date: str = Field("", description="Free-form date label, e.g. '2022 - Atual'")
    cover_image: str = ""
    pdf_url: Optional[str] = None
    photos: List[Photo] = Field(default_factory=list)


class TextWork(BaseModel):
    id: str
    title: str = ""
    category: str = Field("", description="Crônica, Poesia, Artigo, Ensaio or any label")
    date: str = ""
    excerpt: str = ""
    content: str = Field("", description="HTML body")
    cover_image: Optional[str] = None


class Testimonial(BaseModel):
    id: str
    name: str = ""
    role: Optional[str] = ""
    text: str = ""
    avatar: str = ""


class ThemeColors(BaseModel):
    background: str = ""
    text: str = ""
    accent: str = ""
    secondary: str = ""
    surface: Optional[str] = None
    testimonial_background: Optional[str] = None
    testimonial_role: Optional[str] = None


class ThemeFonts(BaseModel):
    serif: str = ""
    sans: str = ""


class ThemeFontSizes(BaseModel):
    base: str = ""
    title: str = ""
    subtitle: str = ""
    caption: str = ""


class ElementStyle(BaseModel):
    font: str = ""
    color: str = ""


class ElementStyles(BaseModel):
    title: ElementStyle = Field(default_factory=ElementStyle)
    subtitle: ElementStyle = Field(default_factory=ElementStyle)
    text: ElementStyle = Field(default_factory=ElementStyle)
    caption: ElementStyle = Field(default_factory=ElementStyle)


class ThemeConfig(BaseModel):
    colors: ThemeColors = Field(default_factory=ThemeColors)
    fonts: ThemeFonts = Field(default_factory=ThemeFonts)
    font_sizes: ThemeFontSizes = Field(default_factory=ThemeFontSizes)
    element_styles: ElementStyles = Field(default_factory=ElementStyles)
    hero_image: Optional[str] = None


class HomeContent(BaseModel):
    hero_title: str = ""
    hero_subtitle: str = ""
    welcome_label: str = ""
    intro_title: str = ""
    intro_description: str = ""


class PageContent(BaseModel):
    title: str = ""
    description: str = ""


class PortfolioContent(BaseModel):
    profile: Profile = Field(default_factory=Profile)
    albums: List[Album] = Field(default_factory=list)
    writings: List[TextWork] = Field(default_factory=list)
    testimonials: List[Testimonial] = Field(default_factory=list)
    theme: ThemeConfig = Field(default_factory=ThemeConfig)
    home: HomeContent = Field(default_factory=HomeContent)
    portfolio_page: PageContent = Field(default_factory=PageContent)
    writings_page: PageContent = Field(default_factory=PageContent)


# Section name -> model used to validate admin writes
SECTION_MODELS = {
    "profile": Profile,
    "albums": List[Album],
    "writings": List[TextWork],
    "testimonials": List[Testimonial],
    "theme": ThemeConfig,
    "home": HomeContent,
    "portfolio_page": PageContent,
    "writings_page": PageContent,
}


class User(BaseModel):
    email: EmailStr
    password_hash: str = Field(..., description="Salted PBKDF2 hash")
    display_name: Optional[str] = Field(None, description="Name shown in the admin panel")


class Session(BaseModel):
    token: str
    email: EmailStr
    expires_at: datetime
