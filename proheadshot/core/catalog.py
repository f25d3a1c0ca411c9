"""Static catalog of outfit options, background presets and negative constraints."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Literal, Tuple, Union

from proheadshot.core.errors import ConfigurationError


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"


# Marker for outfits offered regardless of the selected gender
ALL = "All"


class BackgroundColor(str, Enum):
    WHITE = "off-white"
    BLUE = "blue"
    GREY = "grey"
    OFFICE = "blurred-office"

    @property
    def label(self) -> str:
        return _BACKGROUND_LABELS[self]


_BACKGROUND_LABELS = {
    BackgroundColor.WHITE: "Off-White",
    BackgroundColor.BLUE: "Blue",
    BackgroundColor.GREY: "Grey",
    BackgroundColor.OFFICE: "Blurred Office",
}


@dataclass(frozen=True)
class OutfitOption:
    id: str
    label: str
    description: str
    gender: Union[Gender, Literal["All"]]
    prompt_fragment: str

    def is_available_for(self, gender: Gender) -> bool:
        return self.gender == ALL or self.gender == gender


GLOBAL_NEGATIVE_PROMPT = (
    "no hats (unless religious), no sunglasses, no heavy makeup, "
    "no teeth-showing smile, no large logos, no busy backgrounds, no props, "
    "no shadows across face, no accessories covering face, no reflective glasses, "
    "no uniform of government/military/police."
)

OUTFIT_OPTIONS: Tuple[OutfitOption, ...] = (
    # --- MALE OUTFITS ---
    OutfitOption(
        id="m-corp-suit",
        label="Formal Corporate (Suit)",
        description="Dark suit, white shirt, plain tie.",
        gender=Gender.MALE,
        prompt_fragment=(
            "Lelaki dewasa, memakai suit gelap (navy atau charcoal), kemeja putih berlengan panjang, "
            "leher kemeja terurus, dasi polos (gelap), tiada jaket berlapisan berlebihan, kain wool/cotton, "
            "tanpa aksesori besar, ekspresi neutral. Exclude: tiada corak loud, tiada simbol/logo, "
            "tiada topi, tiada cermin mata gelap."
        ),
    ),
    OutfitOption(
        id="m-baju-melayu",
        label="Baju Melayu",
        description="Traditional Malay attire, Cekak Musang.",
        gender=Gender.MALE,
        prompt_fragment=(
            "Lelaki dewasa, memakai baju melayu plain lengan panjang (warna solid seperti dark green atau maroon), "
            "tanpa sampin untuk gambar rasmi, kolar cekak, kain matte, rambut kemas, ekspresi neutral. "
            "Exclude: tiada corak loud, tiada aksesori besar."
        ),
    ),
    OutfitOption(
        id="m-batik",
        label="Official Batik",
        description="Formal batik shirt with subtle motifs.",
        gender=Gender.MALE,
        prompt_fragment=(
            "Lelaki dewasa, baju batik formal warna gelap dengan motif kecil sahaja, kolar kemas "
            "(baju lengan panjang), bahan cotton/silk blend, tiada aksesori besar, ekspresi neutral. "
            "Exclude: tiada motif terlalu kontras, tiada logo."
        ),
    ),
    OutfitOption(
        id="m-kurta",
        label="Traditional Kurta",
        description="Solid color kurta, minimal design.",
        gender=Gender.MALE,
        prompt_fragment=(
            "Lelaki dewasa, kurta polos, warna solid atau motif kecil, tanpa perhiasan berat, rambut kemas, "
            "ekspresi neutral. Exclude: tiada aksesori mengaburi muka, tiada corak loud."
        ),
    ),
    OutfitOption(
        id="m-smart-casual",
        label="Smart Casual",
        description="Polo shirt or smart plain top.",
        gender=Gender.MALE,
        prompt_fragment=(
            "Lelaki dewasa, polo shirt polos (gelap atau neutral), kolar rapi, tiada corak/branding, "
            "lengan pendek atau panjang kemas, tanpa aksesori besar, ekspresi neutral. "
            "Exclude: tiada logo besar, tiada corak garis menonjol."
        ),
    ),
    OutfitOption(
        id="m-scrubs",
        label="Healthcare / Scrubs",
        description="Solid color medical scrubs.",
        gender=Gender.MALE,
        prompt_fragment=(
            "Lelaki dewasa, memakai scrubs hospital plain (solid color), kolar v sederhana, "
            "tiada lencana/reflection, rambut disimpan kemas, ekspresi neutral. "
            "Exclude: tiada alat perubatan di leher, tiada badge besar yang memantul."
        ),
    ),
    OutfitOption(
        id="m-company",
        label="Company Uniform",
        description="Standard private sector uniform.",
        gender=Gender.MALE,
        prompt_fragment=(
            "Lelaki dewasa, memakai uniform syarikat polos (non-government), kolar rapi, warna solid, "
            "tiada logo berlebih, nama tag minimal atau tiada, ekspresi neutral. "
            "Exclude: tiada logo besar/berkilat, tiada topi."
        ),
    ),
    OutfitOption(
        id="m-school",
        label="School Uniform",
        description="Standard student uniform (Kemeja + Tie).",
        gender=Gender.MALE,
        prompt_fragment=(
            "Remaja, memakai uniform sekolah rapi (kemeja putih + tie), rambut kemas, tiada aksesori, "
            "ekspresi neutral, latar belakang plain. "
            "Exclude: tiada lencana besar yang memantulkan cahaya, tiada topi."
        ),
    ),
    OutfitOption(
        id="m-id-basic",
        label="No-frills ID Look",
        description="Safe, plain contrast top for official ID.",
        gender=Gender.MALE,
        prompt_fragment=(
            "Lelaki dewasa, pakaian polos warna gelap/kontras (contoh: navy atas untuk latar putih), "
            "kolar rapi, tiada aksesori, rambut kemas, ekspresi neutral."
        ),
    ),
    OutfitOption(
        id="m-senior",
        label="Senior Formal",
        description="Conservative formal wear for seniors.",
        gender=Gender.MALE,
        prompt_fragment=(
            "Warga emas, pakaian formal sederhana (kemeja polos), kolar rapi, warna lembut gelap, "
            "rambut kemas, ekspresi neutral, tanpa aksesori berlebihan."
        ),
    ),
    # --- FEMALE OUTFITS ---
    OutfitOption(
        id="f-corp-blazer",
        label="Formal Corporate (Blazer)",
        description="Dark blazer & blouse.",
        gender=Gender.FEMALE,
        prompt_fragment=(
            "Wanita dewasa, blouse putih leher sederhana + blazer gelap, lengan panjang rapi, "
            "warna blouse polos, fabric cotton/silk blend, aksesori minimal (stud earrings sahaja), "
            "rambut rapi atau tudung kemas, ekspresi neutral. Exclude: tiada corak besar, "
            "tiada rantai tebal, tiada logo, tiada ekspresi tersenyum berlebihan."
        ),
    ),
    OutfitOption(
        id="f-baju-kurung",
        label="Baju Kurung",
        description="Modern Baju Kurung, solid color.",
        gender=Gender.FEMALE,
        prompt_fragment=(
            "Wanita dewasa, memakai baju kurung moden lengan panjang, warna solid "
            "(contoh: emerald, maroon, navy), kain matte (kain cotton atau rayon), tudung selendang "
            "padanan warna atau neutral (tudung labuh menutup dada), tiada perhiasan berlebihan, "
            "ekspresi neutral. Exclude: tiada corak corak besar/berkilat, "
            "tiada aksesori yang menutup muka."
        ),
    ),
    OutfitOption(
        id="f-tudung",
        label="Formal Hijab",
        description="Neat, neutral color hijab.",
        gender=Gender.FEMALE,
        prompt_fragment=(
            "Wanita muslimah, tudung labuh kemas menutup leher, warna neutral (beige, navy, hitam), "
            "tiada corak, tudung terikat rapi tanpa lapisan mengaburi muka, pakaian atas polos, "
            "ekspresi neutral. Exclude: tiada brooch besar di muka, tiada corak yang mengganggu."
        ),
    ),
    OutfitOption(
        id="f-batik",
        label="Official Batik",
        description="Formal batik wear.",
        gender=Gender.FEMALE,
        prompt_fragment=(
            "Wanita dewasa, baju batik formal warna gelap dengan motif kecil sahaja, kolar kemas, "
            "bahan cotton/silk blend, tiada aksesori besar, ekspresi neutral. "
            "Exclude: tiada motif terlalu kontras, tiada logo."
        ),
    ),
    OutfitOption(
        id="f-cheongsam",
        label="Cheongsam",
        description="Modern Cheongsam, solid/subtle motif.",
        gender=Gender.FEMALE,
        prompt_fragment=(
            "Wanita dewasa, cheongsam moden leher tinggi kecil, warna solid atau motif kecil, "
            "lengan pendek/panjang kemas, kain matte atau satin lembut, rambut kemas, ekspresi neutral. "
            "Exclude: tiada perhiasan besar, tiada motif mencolok."
        ),
    ),
    OutfitOption(
        id="f-saree",
        label="Saree",
        description="Simple saree with neat blouse.",
        gender=Gender.FEMALE,
        prompt_fragment=(
            "Wanita dewasa, saree sederhana (blouse rapi), warna solid atau motif kecil, "
            "tanpa perhiasan berat yang menutupi muka, rambut kemas, ekspresi neutral. "
            "Exclude: tiada aksesori mengaburi muka, tiada corak loud."
        ),
    ),
    OutfitOption(
        id="f-smart-casual",
        label="Smart Casual",
        description="Polo or smart plain top.",
        gender=Gender.FEMALE,
        prompt_fragment=(
            "Wanita dewasa, polo shirt polos (gelap atau neutral), kolar rapi, tiada corak/branding, "
            "lengan pendek atau panjang kemas, tanpa aksesori besar, ekspresi neutral. "
            "Exclude: tiada logo besar, tiada corak garis menonjol."
        ),
    ),
    OutfitOption(
        id="f-scrubs",
        label="Healthcare / Scrubs",
        description="Solid color medical scrubs.",
        gender=Gender.FEMALE,
        prompt_fragment=(
            "Wanita dewasa, memakai scrubs hospital plain (solid color), kolar v sederhana, "
            "tiada lencana/reflection, rambut disimpan kemas atau tudung yang sesuai, ekspresi neutral. "
            "Exclude: tiada alat perubatan di leher, tiada badge besar yang memantul."
        ),
    ),
    OutfitOption(
        id="f-company",
        label="Company Uniform",
        description="Standard private sector uniform.",
        gender=Gender.FEMALE,
        prompt_fragment=(
            "Wanita dewasa, memakai uniform syarikat polos (non-government), kolar rapi, warna solid, "
            "tiada logo berlebih, nama tag minimal atau tiada, ekspresi neutral. "
            "Exclude: tiada logo besar/berkilat, tiada topi."
        ),
    ),
    OutfitOption(
        id="f-school",
        label="School Uniform",
        description="Standard student uniform.",
        gender=Gender.FEMALE,
        prompt_fragment=(
            "Remaja, memakai uniform sekolah rapi (baju sekolah wanita), rambut kemas, tiada aksesori, "
            "ekspresi neutral, latar belakang plain. "
            "Exclude: tiada lencana besar yang memantulkan cahaya, tiada topi."
        ),
    ),
    OutfitOption(
        id="f-id-basic",
        label="No-frills ID Look",
        description="Safe, plain contrast top.",
        gender=Gender.FEMALE,
        prompt_fragment=(
            "Wanita dewasa, pakaian polos warna gelap/kontras (contoh: navy atas untuk latar putih), "
            "kolar rapi, tiada aksesori, rambut kemas atau tudung kemas, ekspresi neutral."
        ),
    ),
    OutfitOption(
        id="f-senior",
        label="Senior Formal",
        description="Conservative formal wear.",
        gender=Gender.FEMALE,
        prompt_fragment=(
            "Warga emas wanita, pakaian formal sederhana (blouse polos), kolar rapi, warna lembut gelap, "
            "rambut kemas, ekspresi neutral, tanpa aksesori berlebihan."
        ),
    ),
)

BACKGROUND_PROMPTS: Dict[BackgroundColor, str] = {
    BackgroundColor.WHITE: (
        "a solid plain off-white background (hex #F5F5F5), professional studio lighting, "
        "no shadows, matte finish"
    ),
    BackgroundColor.BLUE: (
        "a solid plain blue background (hex color #2E9AFF), flat color, no gradients, "
        "passport photo style"
    ),
    BackgroundColor.GREY: "a neutral grey professional photography backdrop",
    BackgroundColor.OFFICE: (
        "a blurred modern office background with bokeh effect, depth of field"
    ),
}


def list_outfits(gender: Gender) -> List[OutfitOption]:
    """Return outfits offered for ``gender`` in declaration order."""
    return [option for option in OUTFIT_OPTIONS if option.is_available_for(gender)]


def get_outfit(outfit_id: str) -> OutfitOption:
    for option in OUTFIT_OPTIONS:
        if option.id == outfit_id:
            return option
    raise ConfigurationError(f"Unknown outfit id: {outfit_id}")


def default_outfit(gender: Gender) -> OutfitOption:
    """First outfit compatible with ``gender``."""
    options = list_outfits(gender)
    if not options:
        raise ConfigurationError(f"No outfit available for gender {gender}")
    return options[0]


def background_prompt(tag: BackgroundColor | str) -> str:
    try:
        return BACKGROUND_PROMPTS[BackgroundColor(tag)]
    except (ValueError, KeyError) as exc:
        raise ConfigurationError(f"Unknown background preset: {tag}") from exc


def _validate_catalog() -> None:
    seen = set()
    for option in OUTFIT_OPTIONS:
        if option.id in seen:
            raise ConfigurationError(f"Duplicate outfit id in catalog: {option.id}")
        if option.gender != ALL and not isinstance(option.gender, Gender):
            raise ConfigurationError(
                f"Outfit {option.id} has invalid gender {option.gender!r}"
            )
        if not option.prompt_fragment.strip():
            raise ConfigurationError(f"Outfit {option.id} has empty prompt fragment")
        seen.add(option.id)

    for gender in Gender:
        default_outfit(gender)

    missing = set(BackgroundColor) - set(BACKGROUND_PROMPTS)
    if missing:
        raise ConfigurationError(f"Background presets without prompt: {missing}")


_validate_catalog()


__all__ = [
    "ALL",
    "Gender",
    "BackgroundColor",
    "OutfitOption",
    "GLOBAL_NEGATIVE_PROMPT",
    "OUTFIT_OPTIONS",
    "BACKGROUND_PROMPTS",
    "list_outfits",
    "get_outfit",
    "default_outfit",
    "background_prompt",
]
