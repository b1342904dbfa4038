"""
Bundled sample session, fetched once with a built-in copy as fallback
"""
import logging
from typing import Optional, Tuple

import requests

from global_config import SAMPLE_FILE_NAME
from .config import settings

logger = logging.getLogger(__name__)

SAMPLE_CSV = """\
Date,Club Name,Club Type,Club Speed [mph],Ball Speed [mph],Smash Factor,Launch Angle [deg],Launch Direction [deg],Spin Rate [rpm],Spin Axis [deg],Apex Height [yds],Carry Distance [yds],Carry Deviation Distance [yds],Total Distance [yds]
2024-03-02 10:01:12,,Driver,104.2,152.1,1.46,12.8,-1.2,2610,-3.1,31.5,236.4,-6.2,258.9
2024-03-02 10:02:40,,Driver,105.0,154.3,1.47,13.4,0.8,2480,1.9,32.8,241.7,3.5,262.0
2024-03-02 10:04:05,,Driver,103.1,149.6,1.45,11.9,3.1,2750,5.4,29.4,229.8,12.1,249.3
2024-03-02 10:05:31,,Driver,104.6,153.0,1.46,12.5,-0.4,2555,-0.9,31.0,238.2,-1.7,260.4
2024-03-02 10:07:02,,Driver,102.8,147.9,1.44,14.1,-2.6,2890,-4.8,33.6,226.1,-10.4,245.5
2024-03-02 10:11:20,,3 Wood,98.4,142.2,1.45,11.2,-0.9,3420,-1.8,26.9,214.6,-3.4,232.1
2024-03-02 10:12:44,,3 Wood,97.6,140.8,1.44,10.8,1.4,3510,2.6,25.7,210.9,5.2,228.4
2024-03-02 10:14:09,,3 Wood,99.1,143.5,1.45,11.7,0.2,3380,0.5,27.8,217.3,0.8,235.0
2024-03-02 10:18:33,,4 Hybrid,91.7,130.4,1.42,13.6,-1.5,4210,-2.9,27.1,191.8,-5.1,204.2
2024-03-02 10:19:58,,4 Hybrid,92.3,131.6,1.43,14.2,0.6,4105,1.1,28.0,194.5,2.0,206.8
2024-03-02 10:21:17,,4 Hybrid,90.8,128.7,1.42,13.1,2.4,4390,4.0,26.3,188.2,7.9,199.6
2024-03-02 10:26:02,,7 Iron,84.6,113.9,1.35,17.8,-0.7,6420,-1.4,29.6,162.4,-2.0,170.8
2024-03-02 10:27:25,,7 Iron,85.2,115.0,1.35,18.3,1.9,6310,3.2,30.4,164.9,5.5,173.1
2024-03-02 10:28:51,,7 Iron,83.9,112.6,1.34,17.1,-2.8,6580,-5.0,28.7,159.7,-7.8,167.5
2024-03-02 10:30:14,,7 Iron,84.8,114.3,1.35,18.0,0.3,6390,0.6,30.0,163.6,0.9,171.9
2024-03-02 10:35:40,,Pitching Wedge,78.1,98.2,1.26,24.6,-0.5,8720,-1.0,31.8,129.4,-1.1,133.0
2024-03-02 10:37:03,,Pitching Wedge,77.5,97.1,1.25,25.3,1.2,8860,2.1,32.5,127.1,2.7,130.6
2024-03-02 10:38:29,,Pitching Wedge,78.6,99.0,1.26,24.1,-1.8,8610,-3.3,31.2,131.0,-4.1,134.8
2024-03-02 10:43:55,,Sand Wedge,71.2,82.4,1.16,30.8,0.9,9840,1.7,27.9,94.6,1.5,97.2
2024-03-02 10:45:18,,Sand Wedge,70.6,81.5,1.15,31.5,-1.3,9960,-2.4,28.4,92.8,-2.1,95.1
"""


def fetch_sample(url: Optional[str] = None, timeout: Optional[float] = None) -> Tuple[bytes, str]:
    """Sample file bytes and file name.

    One GET with a timeout; any request failure or an empty body falls back
    to the built-in sample. Never raises for network problems.
    """
    url = url or settings.sample_url
    timeout = settings.sample_timeout if timeout is None else timeout
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        if response.content.strip():
            logger.info("Fetched sample data from %s", url)
            return response.content, SAMPLE_FILE_NAME
        logger.warning("Sample at %s was empty, using built-in sample", url)
    except requests.RequestException as e:
        logger.warning("Could not fetch sample data (%s), using built-in sample", e)
    return SAMPLE_CSV.encode("utf-8"), SAMPLE_FILE_NAME
