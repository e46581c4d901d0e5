"""Offline province centroids used by the mathematical provider"""

from dataclasses import dataclass
from typing import Optional, Tuple

from geo_resolver.text import normalize


@dataclass(frozen=True)
class Place:
    name: str
    local_name: str
    lat: float
    lng: float
    aliases: Tuple[str, ...] = ()

    @property
    def names(self) -> Tuple[str, ...]:
        return (self.name, self.local_name) + self.aliases


COUNTRY = Place("Thailand", "ประเทศไทย", 15.8700, 100.9925)

# Provincial seats
PROVINCES: Tuple[Place, ...] = (
    Place("Bangkok", "กรุงเทพมหานคร", 13.7563, 100.5018, ("Krung Thep Maha Nakhon", "Krung Thep", "กรุงเทพ", "กทม")),
    Place("Nonthaburi", "นนทบุรี", 13.8621, 100.5144),
    Place("Pathum Thani", "ปทุมธานี", 14.0208, 100.5250),
    Place("Samut Prakan", "สมุทรปราการ", 13.5991, 100.5998),
    Place("Samut Sakhon", "สมุทรสาคร", 13.5475, 100.2744),
    Place("Nakhon Pathom", "นครปฐม", 13.8199, 100.0622),
    Place("Phra Nakhon Si Ayutthaya", "พระนครศรีอยุธยา", 14.3532, 100.5689, ("Ayutthaya", "อยุธยา")),
    Place("Chon Buri", "ชลบุรี", 13.3611, 100.9847, ("Chonburi",)),
    Place("Rayong", "ระยอง", 12.6814, 101.2816),
    Place("Chachoengsao", "ฉะเชิงเทรา", 13.6904, 101.0779),
    Place("Saraburi", "สระบุรี", 14.5289, 100.9101),
    Place("Prachin Buri", "ปราจีนบุรี", 14.0509, 101.3717, ("Prachinburi",)),
    Place("Lop Buri", "ลพบุรี", 14.7995, 100.6534, ("Lopburi",)),
    Place("Ratchaburi", "ราชบุรี", 13.5283, 99.8134),
    Place("Kanchanaburi", "กาญจนบุรี", 14.0228, 99.5328),
    Place("Nakhon Sawan", "นครสวรรค์", 15.7047, 100.1372),
    Place("Phitsanulok", "พิษณุโลก", 16.8211, 100.2659),
    Place("Chiang Mai", "เชียงใหม่", 18.7883, 98.9853),
    Place("Chiang Rai", "เชียงราย", 19.9105, 99.8406),
    Place("Nakhon Ratchasima", "นครราชสีมา", 14.9799, 102.0978, ("Korat", "โคราช")),
    Place("Khon Kaen", "ขอนแก่น", 16.4322, 102.8236),
    Place("Udon Thani", "อุดรธานี", 17.4138, 102.7872),
    Place("Ubon Ratchathani", "อุบลราชธานี", 15.2287, 104.8564),
    Place("Surat Thani", "สุราษฎร์ธานี", 9.1382, 99.3215),
    Place("Songkhla", "สงขลา", 7.1898, 100.5954),
    Place("Phuket", "ภูเก็ต", 7.8804, 98.3923),
)


def _compact(name: Optional[str]) -> str:
    return normalize(name).replace(" ", "")


def province_names(name: Optional[str]) -> Tuple[str, ...]:
    """Every known spelling of the province called ``name``

    Providers answer in the language they were asked for, so a Thai
    "จังหวัดปทุมธานี" and an English "Pathum Thani" name the same place.
    Names not in the gazetteer come back unchanged.
    """
    if not name:
        return ()
    key = _compact(name)
    for place in PROVINCES:
        if any(_compact(candidate) == key for candidate in place.names):
            return place.names
    return (name,)
